"""Event listener Cog for Bloz.

This cog handles bot lifecycle events (on_ready) and command error handling.
Message-related events are handled by the MessageListenerCog.
"""

import discord
from discord.ext import commands

from bloz.util.logger import get_logger

logger = get_logger("events_listener_cog")

COMMAND_ERROR_MESSAGE = "Something went sideways. Try again."


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and command error handlers."""

    def __init__(self, discord_bot_instance):
        """Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        """
        self.bot = discord_bot_instance
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name='on_ready')
    async def on_ready(self):
        """Log the connection and set the bot's presence."""
        if self.bot.user:
            await self.bot.change_presence(
                status=discord.Status.online,
                activity=discord.Activity(
                    type=discord.ActivityType.watching,
                    name="for stray links",
                ),
            )
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        logger.info("Serving %d guild(s)", len(getattr(self.bot, "guilds", []) or []))

    @commands.Cog.listener(name='on_guild_join')
    async def on_guild_join(self, guild: discord.Guild):
        logger.info(f"Joined guild {guild.name} (ID: {guild.id})")

    @commands.Cog.listener(name='on_application_command_error')
    async def on_application_command_error(self, application_context: discord.ApplicationContext, error: Exception):
        """Log command errors and send the invoker a generic failure message.

        Parameters
        ----------
        application_context:
            The command invocation context.
        error:
            The exception raised during command execution.
        """
        if isinstance(error, commands.CommandNotFound):
            return

        command_name = getattr(application_context.command, 'name', '<unknown>')
        logger.error(f"Error in command '{command_name}': {error}", exc_info=error)

        try:
            await application_context.respond(COMMAND_ERROR_MESSAGE, ephemeral=True)
        except discord.InteractionResponded:
            await application_context.followup.send(COMMAND_ERROR_MESSAGE, ephemeral=True)
        except Exception as exc:
            logger.warning(f"Could not report error for command '{command_name}': {exc}")


def setup(discord_bot_instance):
    """Register the EventsListenerCog with the bot.

    Parameters
    ----------
    discord_bot_instance:
        The Discord bot instance to add this cog to.
    """
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance))
