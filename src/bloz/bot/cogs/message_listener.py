"""Message listener Cog for Bloz.

This cog runs every new guild message through the moderation engine and
hands violations to the warning presenter.
"""

import random
from typing import Optional

import discord
from discord.ext import commands

from bloz.configuration.guild_settings import GuildSettingsManager
from bloz.moderation.moderation_engine import decide
from bloz.moderation.warning_presenter import WarningPresenter
from bloz.util import discord_utils
from bloz.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for filtering newly created messages."""

    def __init__(
        self,
        discord_bot_instance,
        settings_manager: GuildSettingsManager,
        presenter: WarningPresenter,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the message listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        settings_manager:
            Store holding each guild's moderation settings.
        presenter:
            Sends and retracts warnings for removed messages.
        rng:
            Random source for warning selection.
        """
        self.bot = discord_bot_instance
        self.settings_manager = settings_manager
        self.presenter = presenter
        self.rng = rng
        logger.info("Message listener cog loaded")

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message):
        """
        Handle new messages: decide, then warn and delete on a violation.

        DMs and bot authors are ignored before any settings are touched.
        """
        if message.guild is None or discord_utils.is_bot_author(message.author):
            return

        try:
            settings = self.settings_manager.get_guild_settings(message.guild.id)
            moderation_message = discord_utils.build_moderation_message(message)
            decision = decide(moderation_message, settings, self.rng)
            if not decision.should_delete:
                return

            logger.info(
                "Removing message %s from %s in channel %s (%s)",
                message.id,
                message.author,
                message.channel.id,
                decision.violation,
            )
            await self.presenter.warn(message, decision.warning or "")
        except Exception as e:
            logger.error(f"Error moderating message {message.id}: {e}", exc_info=True)


def setup(discord_bot_instance, settings_manager: GuildSettingsManager, presenter: WarningPresenter):
    """
    Register the MessageListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    settings_manager:
        Shared guild settings store.
    presenter:
        Shared warning presenter.
    """
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance, settings_manager, presenter))
