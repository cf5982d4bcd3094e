"""
Persistent per-guild configuration storage for the link moderation bot.

Responsibilities:
- Keep every guild's channel modes, whitelist, bypass roles and link policy in memory
- Flush the whole store to a JSON file after each change

File layout::

    {"guilds": {"<guild_id>": {"channels": {...}, "whitelist": [...],
                               "bypassRoles": [...], "policy": "standard"}}}

Writes are synchronous and best-effort: a failed write is logged and the
in-memory change is kept.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from bloz.datatypes.guild_settings import ChannelMode, GuildSettings, LinkPolicy
from bloz.moderation.link_detection import normalize_domain
from bloz.util.logger import get_logger

logger = get_logger("guild_settings_manager")


def _unique_strings(values: Any) -> List[str]:
    if not isinstance(values, list):
        return []
    return list(dict.fromkeys(str(value).strip() for value in values if str(value).strip()))


def guild_settings_from_dict(guild_id: str, guild_entry: Dict[str, Any]) -> GuildSettings:
    """Build a :class:`GuildSettings` from its JSON entry, dropping invalid values."""
    settings = GuildSettings(guild_id=str(guild_id))

    channels = guild_entry.get("channels", {})
    if isinstance(channels, dict):
        for channel_id, raw_mode in channels.items():
            mode = ChannelMode.parse(raw_mode)
            if mode is None:
                logger.warning("[GUILD SETTINGS MANAGER] Dropping unknown mode %r for channel %s", raw_mode, channel_id)
                continue
            settings.channel_modes[str(channel_id)] = mode

    whitelist = (normalize_domain(domain) for domain in _unique_strings(guild_entry.get("whitelist")))
    settings.whitelist = list(dict.fromkeys(domain for domain in whitelist if domain))
    settings.bypass_roles = _unique_strings(guild_entry.get("bypassRoles"))
    settings.policy = LinkPolicy.parse(guild_entry.get("policy", LinkPolicy.STANDARD.value)) or LinkPolicy.STANDARD
    return settings


class GuildSettingsManager:
    """
    In-memory registry of :class:`GuildSettings` backed by a JSON file.

    Every mutator saves the whole store before returning. Settings for a guild
    are created on first access and never removed.
    """

    def __init__(self, settings_path: Path | str):
        self.settings_path = Path(settings_path)
        self.guilds: Dict[str, GuildSettings] = {}
        logger.info("[GUILD SETTINGS MANAGER] Guild settings manager initialized (%s)", self.settings_path)

    # -------- Lookup --------
    def ensure_guild(self, guild_id: Any) -> GuildSettings:
        """Create default settings for a guild if none exist and return the record."""
        key = str(guild_id)
        settings = self.guilds.get(key)
        if settings is None:
            settings = GuildSettings(guild_id=key)
            self.guilds[key] = settings
        return settings

    def get_guild_settings(self, guild_id: Any) -> GuildSettings:
        """Fetch the cached :class:`GuildSettings` instance for the given guild."""
        return self.ensure_guild(guild_id)

    # -------- Channel modes --------
    def set_channel_mode(self, guild_id: Any, channel_id: Any, mode: ChannelMode) -> None:
        settings = self.ensure_guild(guild_id)
        settings.channel_modes[str(channel_id)] = mode
        logger.debug("[GUILD SETTINGS MANAGER] Mode for channel %s in guild %s set to %s", channel_id, guild_id, mode)
        self.persist()

    # -------- Whitelist --------
    def add_whitelist_domain(self, guild_id: Any, domain: str) -> bool:
        """Add a normalized domain; return False if it was already present or blank."""
        settings = self.ensure_guild(guild_id)
        domain = normalize_domain(domain)
        if not domain or domain in settings.whitelist:
            return False
        settings.whitelist.append(domain)
        self.persist()
        return True

    def remove_whitelist_domain(self, guild_id: Any, domain: str) -> bool:
        settings = self.ensure_guild(guild_id)
        domain = normalize_domain(domain)
        if domain not in settings.whitelist:
            return False
        settings.whitelist = [entry for entry in settings.whitelist if entry != domain]
        self.persist()
        return True

    def clear_whitelist(self, guild_id: Any) -> None:
        self.ensure_guild(guild_id).whitelist = []
        self.persist()

    # -------- Bypass roles --------
    def add_bypass_role(self, guild_id: Any, role_id: Any) -> bool:
        settings = self.ensure_guild(guild_id)
        role_key = str(role_id)
        if role_key in settings.bypass_roles:
            return False
        settings.bypass_roles.append(role_key)
        self.persist()
        return True

    def remove_bypass_role(self, guild_id: Any, role_id: Any) -> bool:
        settings = self.ensure_guild(guild_id)
        role_key = str(role_id)
        if role_key not in settings.bypass_roles:
            return False
        settings.bypass_roles = [entry for entry in settings.bypass_roles if entry != role_key]
        self.persist()
        return True

    def clear_bypass_roles(self, guild_id: Any) -> None:
        self.ensure_guild(guild_id).bypass_roles = []
        self.persist()

    # -------- Link policy --------
    def set_policy(self, guild_id: Any, policy: LinkPolicy) -> None:
        self.ensure_guild(guild_id).policy = policy
        logger.debug("[GUILD SETTINGS MANAGER] Link policy for guild %s set to %s", guild_id, policy)
        self.persist()

    # -------- Persistence helpers --------
    def to_dict(self) -> Dict[str, Any]:
        return {"guilds": {guild_id: settings.to_dict() for guild_id, settings in self.guilds.items()}}

    def load_dict(self, settings_data: Any) -> None:
        """Replace the in-memory store with the contents of ``settings_data``."""
        self.guilds.clear()
        if not isinstance(settings_data, dict):
            return
        guilds_data = settings_data.get("guilds", {})
        if not isinstance(guilds_data, dict):
            return
        for guild_id, guild_entry in guilds_data.items():
            if isinstance(guild_entry, dict):
                self.guilds[str(guild_id)] = guild_settings_from_dict(guild_id, guild_entry)

    def load_from_disk(self) -> bool:
        """Load persisted settings, falling back to an empty store on any failure.

        Returns True if at least one guild was loaded.
        """
        try:
            with self.settings_path.open("r", encoding="utf-8") as file_handle:
                settings_data = json.load(file_handle)
        except FileNotFoundError:
            logger.info("[GUILD SETTINGS MANAGER] No settings file at %s, starting empty", self.settings_path)
            self.guilds.clear()
            return False
        except (OSError, ValueError) as exc:
            logger.error("[GUILD SETTINGS MANAGER] Failed to read settings from %s: %s", self.settings_path, exc)
            self.guilds.clear()
            return False

        self.load_dict(settings_data)
        if self.guilds:
            logger.info("[GUILD SETTINGS MANAGER] Loaded settings for %d guild(s)", len(self.guilds))
        return bool(self.guilds)

    def persist(self) -> bool:
        """Write the whole store to disk, overwriting the file.

        Return whether the write was successful or not.
        """
        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)
            with self.settings_path.open("w", encoding="utf-8") as file_handle:
                json.dump(self.to_dict(), file_handle, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("[GUILD SETTINGS MANAGER] Failed to write settings to %s: %s", self.settings_path, exc)
            return False
        logger.debug("[GUILD SETTINGS MANAGER] Persisted %d guild(s) to %s", len(self.guilds), self.settings_path)
        return True
