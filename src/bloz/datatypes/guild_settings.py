"""
Persistent per-guild configuration values.

JSON layout (one entry under ``guilds`` per guild id):
- channels: channel_id -> mode string
- whitelist: list of normalized domains
- bypassRoles: list of role ids
- policy: link policy name (optional, defaults to "standard")
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ChannelMode(Enum):
    """Enforcement mode applied to a single channel."""

    OFF = "off"
    LINKS_ONLY = "links-only"
    NO_LINKS = "no-links"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Optional["ChannelMode"]:
        """Return the mode named by ``value`` or None when it is not a known mode."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


class LinkPolicy(Enum):
    """How links-only channels judge a message.

    STANDARD accepts any message containing a link (subject to the exact-match
    whitelist). SINGLE_LINK requires the message to be exactly one bare URL
    whose host is whitelisted or a subdomain of a whitelisted domain.
    """

    STANDARD = "standard"
    SINGLE_LINK = "single-link"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Any) -> Optional["LinkPolicy"]:
        """Return the policy named by ``value`` or None when it is unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# Bounds for how many messages a history cleanup may scan
MIN_CLEANUP_LIMIT = 1
MAX_CLEANUP_LIMIT = 100


def clamp_limit(limit: int) -> int:
    return max(MIN_CLEANUP_LIMIT, min(MAX_CLEANUP_LIMIT, int(limit)))


@dataclass(slots=True)
class GuildSettings:
    """Persistent per-guild configuration values.

    Channel and role ids are kept as decimal strings so they map directly onto
    JSON object keys. ``whitelist`` and ``bypass_roles`` keep insertion order and
    never contain duplicates; the manager enforces that on every mutation.
    """

    guild_id: str
    channel_modes: Dict[str, ChannelMode] = field(default_factory=dict)
    whitelist: List[str] = field(default_factory=list)
    bypass_roles: List[str] = field(default_factory=list)
    policy: LinkPolicy = LinkPolicy.STANDARD

    def mode_for(self, channel_id: Any) -> ChannelMode:
        """Return the mode configured for ``channel_id`` (OFF when unset)."""
        return self.channel_modes.get(str(channel_id), ChannelMode.OFF)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channels": {channel_id: mode.value for channel_id, mode in self.channel_modes.items()},
            "whitelist": list(self.whitelist),
            "bypassRoles": list(self.bypass_roles),
            "policy": self.policy.value,
        }
