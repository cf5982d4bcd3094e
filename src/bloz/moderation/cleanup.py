"""
Bulk cleanup of recent channel history.

Walks the last ``limit`` messages of a channel and removes every non-bot
message that is not exactly one bare URL (with a whitelisted host when the
guild has a whitelist). A failed history fetch ends the scan early; the
count of messages removed so far is still returned.
"""

from __future__ import annotations

import discord

from bloz.datatypes.guild_settings import GuildSettings, clamp_limit
from bloz.moderation.moderation_engine import is_cleanup_violation
from bloz.util.discord_utils import is_bot_author, safe_delete_message
from bloz.util.logger import get_logger

logger = get_logger("cleanup")


async def run_cleanup(channel: discord.abc.Messageable, settings: GuildSettings, limit: int) -> int:
    """Delete non-conforming messages among the last ``limit`` in ``channel``.

    Parameters
    ----------
    channel:
        Channel whose history is scanned.
    settings:
        Settings of the guild owning the channel; only the whitelist is used.
    limit:
        Number of messages to scan, clamped to 1..100.

    Returns
    -------
    int
        Number of messages actually deleted.
    """
    limit = clamp_limit(limit)
    scanned = 0
    deleted = 0

    try:
        async for message in channel.history(limit=limit):
            scanned += 1
            if is_bot_author(message.author):
                continue
            if not is_cleanup_violation(message.content or "", settings.whitelist):
                continue
            if await safe_delete_message(message):
                deleted += 1
    except discord.HTTPException as exc:
        logger.warning(
            "Could not read history of channel %s after %d message(s): %s",
            getattr(channel, "id", "?"),
            scanned,
            exc,
        )

    logger.info(
        "Cleanup in channel %s scanned %d message(s), deleted %d",
        getattr(channel, "id", "?"),
        scanned,
        deleted,
    )
    return deleted
