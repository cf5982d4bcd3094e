"""Tests for link_detection helpers."""

import pytest

from bloz.moderation.link_detection import (
    extract_domains,
    has_link,
    host_matches_whitelist,
    hostname_of,
    normalize_domain,
    single_bare_url,
)


class TestHasLink:
    def test_plain_text_has_no_link(self):
        assert has_link("no links here") is False

    def test_bare_domain_counts_as_link(self):
        assert has_link("check example.com") is True

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_input(self, text):
        assert has_link(text) is False

    def test_scheme_is_case_insensitive(self):
        assert has_link("HTTPS://Example.COM/path?q=1") is True

    def test_single_letter_tld_is_not_a_link(self):
        assert has_link("version 2.x is out") is False

    @pytest.mark.parametrize("text", ["bonjour.ça va", "привет.мир", "ok.日本"])
    def test_non_ascii_words_joined_by_a_dot_are_not_links(self, text):
        assert has_link(text) is False

    def test_ascii_domain_inside_non_english_text(self):
        assert has_link("voilà le site: example.com") is True


class TestExtractDomains:
    def test_no_scheme_returns_empty(self):
        assert extract_domains("visit example.com or www.youtube.com") == []

    def test_strips_www_and_keeps_subdomains(self):
        text = "see https://www.example.com and http://sub.example.com/path?x=1 too"
        assert extract_domains(text) == ["example.com", "sub.example.com"]

    def test_duplicates_are_kept_in_order(self):
        text = "https://b.com https://a.com https://b.com"
        assert extract_domains(text) == ["b.com", "a.com", "b.com"]

    def test_malformed_url_is_skipped(self):
        assert extract_domains("http://[::1 broken, but https://ok.com works") == ["ok.com"]

    def test_url_without_host_is_skipped(self):
        assert extract_domains("https:///just-a-path") == []

    @pytest.mark.parametrize("url", ["https://youtube.com:abc/x", "https://youtube.com:99999/x"])
    def test_bad_port_is_skipped(self, url):
        assert extract_domains(f"{url} https://ok.com") == ["ok.com"]

    def test_angle_brackets_end_the_token(self):
        assert extract_domains("<https://example.com/page>") == ["example.com"]

    def test_hostname_is_lowercased(self):
        assert extract_domains("HTTPS://WWW.YouTube.com/watch") == ["youtube.com"]

    def test_none_input(self):
        assert extract_domains(None) == []


def test_hostname_of_invalid_url():
    assert hostname_of("http://[::1") is None
    assert hostname_of("https://www.Example.com:8080/x") == "example.com"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("youtube.com", "youtube.com"),
        ("  HTTPS://www.YouTube.com/watch ", "youtube.com"),
        ("http://discord.gg", "discord.gg"),
        ("WWW.Example.org", "example.org"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_domain(raw, expected):
    assert normalize_domain(raw) == expected


def test_host_matches_whitelist_exact_and_subdomain():
    whitelist = ["youtube.com"]
    assert host_matches_whitelist("youtube.com", whitelist)
    assert host_matches_whitelist("m.youtube.com", whitelist)
    assert not host_matches_whitelist("notyoutube.com", whitelist)
    assert not host_matches_whitelist("youtube.com.evil.net", whitelist)


def test_single_bare_url():
    assert single_bare_url("  https://youtube.com/x  ") == "https://youtube.com/x"
    assert single_bare_url("look https://a.com") is None
    assert single_bare_url("https://a.com https://b.com") is None
    assert single_bare_url("youtube.com") is None
    assert single_bare_url("") is None
