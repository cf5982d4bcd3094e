"""
Warning presenter: reply to a removed message, then clean everything up.

The reply is retracted by a detached task after ``warn_ttl_ms``. Nothing here
raises; every Discord failure is logged and dropped so the offending user
never sees an error.
"""

from __future__ import annotations

import asyncio
from typing import Set

import discord

from bloz.util.discord_utils import safe_delete_message
from bloz.util.logger import get_logger

logger = get_logger("warning_presenter")


class WarningPresenter:
    """Send persona-voiced warnings that delete themselves."""

    def __init__(self, persona_name: str = "Bloz", warn_ttl_ms: int = 6000):
        self.persona_name = persona_name
        self.warn_ttl_ms = warn_ttl_ms
        # Strong references so pending retractions are not garbage collected.
        self._retractions: Set[asyncio.Task] = set()

    def format_warning(self, template_text: str) -> str:
        return f"{self.persona_name}: {template_text}"

    async def warn(self, message: discord.Message, template_text: str) -> None:
        """Reply with the warning, schedule its retraction and delete ``message``."""
        try:
            reply = await message.reply(content=self.format_warning(template_text))
        except discord.HTTPException as exc:
            logger.warning("Failed to send warning for message %s: %s", message.id, exc)
            reply = None
        except Exception:
            logger.exception("Unexpected error sending warning for message %s", message.id)
            reply = None

        if reply is not None:
            self.schedule_retraction(reply)

        await safe_delete_message(message)

    def schedule_retraction(self, reply: discord.Message) -> asyncio.Task:
        task = asyncio.create_task(self._retract_later(reply))
        self._retractions.add(task)
        task.add_done_callback(self._retractions.discard)
        return task

    async def _retract_later(self, reply: discord.Message) -> None:
        await asyncio.sleep(self.warn_ttl_ms / 1000)
        await safe_delete_message(reply)

    @property
    def pending_retractions(self) -> int:
        return len(self._retractions)
