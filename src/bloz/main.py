"""
Bloz Link Moderation Bot
========================

A Discord bot that keeps channels on topic: links-only channels lose plain
chatter, no-links channels lose links, and an optional domain whitelist keeps
everything else honest. Settings are managed with slash commands and stored
in a small JSON file.
"""

import asyncio
import os
import sys
from pathlib import Path

import discord
from dotenv import load_dotenv

from bloz.configuration.app_configuration import AppConfig, CONFIG_PATH
from bloz.configuration.guild_settings import GuildSettingsManager
from bloz.moderation.warning_presenter import WarningPresenter
from bloz.util.logger import get_logger, handle_exception

logger = get_logger("main")


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. BLOZ_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("BLOZ_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Returns
    -------
    str
        Discord bot token extracted from the loaded environment.

    Raises
    ------
    SystemExit
        If neither ``DISCORD_TOKEN`` nor ``DISCORD_BOT_TOKEN`` is set.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_TOKEN") or os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Construct the Discord intents needed to read guild messages.

    Returns
    -------
    discord.Intents
        Intents enabling guild and message events, including message content.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.messages = True
    intents.message_content = True
    return intents


def load_cogs(
    discord_bot_instance: discord.Bot,
    settings_manager: GuildSettingsManager,
    presenter: WarningPresenter,
    cleanup_default_limit: int,
) -> None:
    """Register all operational cogs with the provided Discord bot instance."""
    from bloz.bot.cogs import events_listener, guild_settings_cmds, message_listener

    events_listener.setup(discord_bot_instance)
    message_listener.setup(discord_bot_instance, settings_manager, presenter)
    guild_settings_cmds.setup(discord_bot_instance, settings_manager, cleanup_default_limit)

    logger.info("All cogs loaded successfully.")


def create_bot(config: AppConfig, settings_manager: GuildSettingsManager) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    presenter = WarningPresenter(persona_name=config.persona_name, warn_ttl_ms=config.warn_ttl_ms)
    load_cogs(bot, settings_manager, presenter, config.cleanup_default_limit)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None = None) -> None:
    """Close the Discord connection if it is still open."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing the Discord client: %s", exc)
    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Load configuration and settings, then run the bot until it stops.

    Returns
    -------
    int
        Process exit code reflecting success or failure.
    """
    token = load_environment()
    config = AppConfig(BASE_DIR / CONFIG_PATH)

    settings_manager = GuildSettingsManager(config.data_path)
    settings_manager.load_from_disk()

    try:
        bot = create_bot(config, settings_manager)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    exit_code = 0
    try:
        await start_bot(bot, token)
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot)

    return exit_code


def main() -> int:
    """Entrypoint that orchestrates the async runtime and returns the process code."""
    sys.excepthook = handle_exception
    os.chdir(BASE_DIR)
    logger.info("Starting Bloz…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
