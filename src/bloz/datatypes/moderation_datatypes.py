"""
Message and decision types for link moderation.

- `ModerationMessage`: Normalized, read-only view of an incoming Discord message.
- `ModerationDecision`: Outcome of the moderation engine for one message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class ActionType(Enum):
    """Enumeration of moderation outcomes."""

    ALLOW = "allow"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


class ViolationType(Enum):
    """Which rule a deleted message broke; selects the warning pool."""

    DOMAIN_BLOCKED = "domain_blocked"
    LINK_REQUIRED = "link_required"
    LINK_NOT_ALLOWED = "link_not_allowed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ModerationMessage:
    """Normalized message data consumed by the moderation engine.

    Attributes:
        guild_id (str): ID of the guild where the message was sent.
        channel_id (str): ID of the channel where the message was sent.
        author_is_bot (bool): Whether the author is a bot account.
        author_role_ids (FrozenSet[str]): Role ids held by the author.
        content (str): Raw text content.
        attachment_urls (Tuple[str, ...]): URLs of the message attachments, in order.
    """

    guild_id: str
    channel_id: str
    author_is_bot: bool = False
    author_role_ids: FrozenSet[str] = field(default_factory=frozenset)
    content: str = ""
    attachment_urls: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ModerationDecision:
    """Result of evaluating a message against a guild's settings.

    Attributes:
        action (ActionType): ALLOW or DELETE.
        violation (ViolationType | None): Rule that triggered a DELETE.
        warning (str | None): Warning text (without persona prefix) to present.
        offending_domain (str | None): First non-whitelisted domain, for domain violations.
    """

    action: ActionType
    violation: Optional[ViolationType] = None
    warning: Optional[str] = None
    offending_domain: Optional[str] = None

    @property
    def should_delete(self) -> bool:
        return self.action is ActionType.DELETE

    @classmethod
    def allow(cls) -> "ModerationDecision":
        return cls(action=ActionType.ALLOW)
