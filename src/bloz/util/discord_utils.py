"""
discord_utils.py
================

Low-level Discord utility functions for Bloz.

Stateless helpers for message deletion, permission checks, and conversion of
Discord messages into :class:`ModerationMessage`.
"""

from typing import Union

import discord

from bloz.datatypes.moderation_datatypes import ModerationMessage
from bloz.util.logger import get_logger

logger = get_logger("discord_utils")


def is_bot_author(author: Union[discord.User, discord.Member, None]) -> bool:
    """Return True if the author is missing or is a bot account."""
    return author is None or bool(getattr(author, "bot", False))


def build_moderation_message(message: discord.Message) -> ModerationMessage:
    """
    Normalize a Discord message for the moderation engine.

    Role ids are only available when the author is a guild member; for plain
    users (e.g. webhooks or uncached members) the role set is empty.

    Args:
        message (discord.Message): Message received from the gateway.

    Returns:
        ModerationMessage: Read-only snapshot of the fields the engine needs.
    """
    author = message.author
    roles = getattr(author, "roles", None) or []
    return ModerationMessage(
        guild_id=str(message.guild.id) if message.guild else "",
        channel_id=str(message.channel.id),
        author_is_bot=is_bot_author(author),
        author_role_ids=frozenset(str(role.id) for role in roles),
        content=message.content or "",
        attachment_urls=tuple(attachment.url for attachment in message.attachments if attachment.url),
    )


async def safe_delete_message(message: discord.Message) -> bool:
    """
    Attempt to delete a Discord message, suppressing recoverable errors.

    Args:
        message (discord.Message): The message to delete.

    Returns:
        bool: True if deletion succeeded, False otherwise.
    """
    try:
        await message.delete()
        return True
    except discord.NotFound:
        logger.debug(f"Message {message.id} was already deleted")
    except discord.Forbidden:
        logger.warning(f"No permission to delete message {message.id}")
    except Exception as exc:
        logger.error(f"Error deleting message {message.id}: {exc}")
    return False


def has_permissions(application_context: discord.ApplicationContext, **required_permissions) -> bool:
    """
    Check if the command issuer has all specified permissions in the guild.

    Args:
        application_context (discord.ApplicationContext): The command context.
        **required_permissions: Permission flags to check, e.g. ``manage_guild=True``.

    Returns:
        bool: True if all permissions are present, False otherwise.
    """
    permissions = getattr(application_context.user, "guild_permissions", None)
    if permissions is None:
        return False
    return all(getattr(permissions, permission_name, False) for permission_name in required_permissions)
