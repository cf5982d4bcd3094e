import json
from pathlib import Path

import pytest

from bloz.configuration.guild_settings import GuildSettingsManager, guild_settings_from_dict
from bloz.datatypes.guild_settings import ChannelMode, GuildSettings, LinkPolicy


@pytest.fixture()
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "data.json"


@pytest.fixture()
def manager(settings_path: Path) -> GuildSettingsManager:
    return GuildSettingsManager(settings_path)


def test_unknown_guild_gets_default_settings(manager: GuildSettingsManager) -> None:
    settings = manager.get_guild_settings(123)

    assert settings.guild_id == "123"
    assert settings.channel_modes == {}
    assert settings.whitelist == []
    assert settings.bypass_roles == []
    assert settings.policy is LinkPolicy.STANDARD
    assert settings.mode_for(55) is ChannelMode.OFF
    assert list(manager.guilds) == ["123"]


def test_mutations_are_written_and_reloaded(manager: GuildSettingsManager, settings_path: Path) -> None:
    manager.set_channel_mode(1, 123, ChannelMode.NO_LINKS)
    manager.add_whitelist_domain(1, "youtube.com")
    manager.add_bypass_role(1, 456)

    on_disk = json.loads(settings_path.read_text(encoding="utf-8"))
    assert on_disk == {
        "guilds": {
            "1": {
                "channels": {"123": "no-links"},
                "whitelist": ["youtube.com"],
                "bypassRoles": ["456"],
                "policy": "standard",
            }
        }
    }

    reloaded = GuildSettingsManager(settings_path)
    assert reloaded.load_from_disk() is True
    settings = reloaded.get_guild_settings("1")
    assert settings.mode_for("123") is ChannelMode.NO_LINKS
    assert settings.whitelist == ["youtube.com"]
    assert settings.bypass_roles == ["456"]


def test_load_file_without_policy_key(settings_path: Path) -> None:
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text(
        json.dumps({"guilds": {"9": {"channels": {"10": "links-only"}, "whitelist": [], "bypassRoles": []}}}),
        encoding="utf-8",
    )

    manager = GuildSettingsManager(settings_path)
    assert manager.load_from_disk() is True

    settings = manager.get_guild_settings(9)
    assert settings.mode_for(10) is ChannelMode.LINKS_ONLY
    assert settings.policy is LinkPolicy.STANDARD


def test_missing_file_starts_empty(manager: GuildSettingsManager) -> None:
    manager.ensure_guild(1)

    assert manager.load_from_disk() is False
    assert manager.guilds == {}


@pytest.mark.parametrize("payload", ["{not json", "[1, 2, 3]", '{"guilds": []}', "null"])
def test_unusable_file_starts_empty(settings_path: Path, payload: str) -> None:
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text(payload, encoding="utf-8")

    manager = GuildSettingsManager(settings_path)
    manager.ensure_guild(1)

    assert manager.load_from_disk() is False
    assert manager.guilds == {}


def test_guild_entry_is_cleaned_on_load() -> None:
    settings = guild_settings_from_dict(
        "5",
        {
            "channels": {"1": "links-only", "2": "everything", "3": "NO-LINKS"},
            "whitelist": ["YouTube.com", "https://www.youtube.com/", "discord.gg", "  "],
            "bypassRoles": ["7", "7", 8],
            "policy": "bogus",
        },
    )

    assert settings.channel_modes == {"1": ChannelMode.LINKS_ONLY, "3": ChannelMode.NO_LINKS}
    assert settings.whitelist == ["youtube.com", "discord.gg"]
    assert settings.bypass_roles == ["7", "8"]
    assert settings.policy is LinkPolicy.STANDARD


def test_non_list_values_are_ignored() -> None:
    settings = guild_settings_from_dict("5", {"channels": [], "whitelist": "youtube.com", "bypassRoles": None})

    assert settings == GuildSettings(guild_id="5")


def test_whitelist_add_remove_clear(manager: GuildSettingsManager) -> None:
    assert manager.add_whitelist_domain(1, "HTTPS://www.YouTube.com/watch") is True
    assert manager.add_whitelist_domain(1, "youtube.com") is False
    assert manager.add_whitelist_domain(1, "   ") is False
    assert manager.add_whitelist_domain(1, "discord.gg") is True
    assert manager.get_guild_settings(1).whitelist == ["youtube.com", "discord.gg"]

    assert manager.remove_whitelist_domain(1, "www.youtube.com") is True
    assert manager.remove_whitelist_domain(1, "youtube.com") is False
    assert manager.get_guild_settings(1).whitelist == ["discord.gg"]

    manager.clear_whitelist(1)
    assert manager.get_guild_settings(1).whitelist == []


def test_bypass_roles_add_remove_clear(manager: GuildSettingsManager) -> None:
    assert manager.add_bypass_role(1, 456) is True
    assert manager.add_bypass_role(1, "456") is False
    assert manager.add_bypass_role(1, 789) is True

    assert manager.remove_bypass_role(1, 456) is True
    assert manager.remove_bypass_role(1, 456) is False
    assert manager.get_guild_settings(1).bypass_roles == ["789"]

    manager.clear_bypass_roles(1)
    assert manager.get_guild_settings(1).bypass_roles == []


def test_set_policy_is_persisted(manager: GuildSettingsManager, settings_path: Path) -> None:
    manager.set_policy(3, LinkPolicy.SINGLE_LINK)

    reloaded = GuildSettingsManager(settings_path)
    reloaded.load_from_disk()
    assert reloaded.get_guild_settings(3).policy is LinkPolicy.SINGLE_LINK


def test_failed_write_keeps_memory_state(tmp_path: Path) -> None:
    blocked_path = tmp_path / "occupied"
    blocked_path.mkdir()
    manager = GuildSettingsManager(blocked_path)

    manager.set_channel_mode(1, 2, ChannelMode.LINKS_ONLY)

    assert manager.persist() is False
    assert manager.get_guild_settings(1).mode_for(2) is ChannelMode.LINKS_ONLY
