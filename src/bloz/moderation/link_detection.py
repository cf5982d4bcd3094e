"""
link_detection.py
=================

Pure helpers for finding links in message text.

`has_link` is deliberately broad: a bare ``example.com`` counts as a link so
that links-only and no-links channels cannot be dodged by leaving out the
scheme. `extract_domains` is strict and only looks at ``http(s)://`` tokens,
because those are the only ones Discord renders as clickable links.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

# Optional scheme, dotted ASCII host with a TLD of two or more characters, optional path.
URL_PATTERN = re.compile(
    r"\b((?:https?://)?(?:[\w-]+\.)+[\w-]{2,}(?:/[\w\-._~:/?#\[\]@!$&'()*+,;=%]*)?)\b",
    re.IGNORECASE | re.ASCII,
)

# Explicit http(s) tokens; '>' ends a token so <https://...> suppressed embeds still parse.
HTTP_URL_PATTERN = re.compile(r"\bhttps?://[^\s>]+", re.IGNORECASE)

SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)

BARE_URL_PATTERN = re.compile(r"https?://\S+", re.IGNORECASE)


def has_link(text: Optional[str]) -> bool:
    """Return True if ``text`` contains anything that looks like a URL."""
    if not text:
        return False
    return URL_PATTERN.search(text) is not None


def has_http_url(text: Optional[str]) -> bool:
    """Return True if ``text`` contains an explicit ``http://`` or ``https://`` scheme."""
    if not text:
        return False
    return re.search(r"https?://", text, re.IGNORECASE) is not None


def strip_www(hostname: str) -> str:
    return hostname[4:] if hostname.startswith("www.") else hostname


def hostname_of(url: str) -> Optional[str]:
    """Parse a single URL and return its hostname without a leading ``www.``.

    Returns None when the URL cannot be parsed, has a non-numeric or
    out-of-range port, or carries no hostname.
    """
    try:
        parts = urlsplit(url)
        # .port raises ValueError for a malformed port
        hostname, _port = parts.hostname, parts.port
    except ValueError:
        return None
    if not hostname:
        return None
    return strip_www(hostname)


def extract_domains(text: Optional[str]) -> List[str]:
    """Return the hostname of every ``http(s)://`` URL in ``text``.

    Hostnames are lowercased with a leading ``www.`` removed and come back in
    order of first occurrence. Duplicates are kept; malformed URLs are skipped.
    """
    if not text:
        return []

    domains: List[str] = []
    for match in HTTP_URL_PATTERN.finditer(text):
        hostname = hostname_of(match.group(0))
        if hostname is not None:
            domains.append(hostname)
    return domains


def normalize_domain(raw: Optional[str]) -> str:
    """Normalize user input into the form stored in a whitelist.

    ``"  HTTPS://www.YouTube.com/watch "`` becomes ``"youtube.com"``.
    """
    domain = (raw or "").strip().lower()
    domain = SCHEME_PATTERN.sub("", domain)
    domain = strip_www(domain)
    return domain.split("/", 1)[0].strip()


def host_matches_whitelist(hostname: str, whitelist: Iterable[str]) -> bool:
    """Return True if ``hostname`` equals a whitelisted domain or is a subdomain of one."""
    return any(hostname == domain or hostname.endswith("." + domain) for domain in whitelist)


def single_bare_url(text: Optional[str]) -> Optional[str]:
    """Return the URL if ``text`` is exactly one http(s) URL and nothing else."""
    stripped = (text or "").strip()
    if BARE_URL_PATTERN.fullmatch(stripped):
        return stripped
    return None
