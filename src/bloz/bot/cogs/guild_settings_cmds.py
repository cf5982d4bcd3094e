"""
Settings cog: guild-scoped configuration of link moderation.

Slash commands:
- /mode set, /mode view: per-channel mode (off, links-only, no-links)
- /whitelist: add, remove, list or clear allowed link domains
- /bypass: add, remove, list or clear roles that skip moderation
- /policy: pick the standard or single-link policy for links-only channels
- /settings: read-only summary of the server configuration
- /test: show what the detector sees in a piece of text
- /cleanup: sweep recent channel history

Configuration commands require the Manage Server permission, /cleanup requires
Manage Messages. Responses are ephemeral to avoid leaking configuration in
public channels. Unexpected errors bubble up to the events listener, which
answers with a generic failure message.
"""


import discord
from discord import Option
from discord.ext import commands

from bloz.configuration.guild_settings import GuildSettingsManager
from bloz.datatypes.guild_settings import (
    MAX_CLEANUP_LIMIT,
    MIN_CLEANUP_LIMIT,
    ChannelMode,
    GuildSettings,
    LinkPolicy,
)
from bloz.moderation.cleanup import run_cleanup
from bloz.moderation.link_detection import extract_domains, has_link, normalize_domain
from bloz.util.discord_utils import has_permissions
from bloz.util.logger import get_logger

logger = get_logger("settings_cog")

MODE_CHOICES = [mode.value for mode in ChannelMode]
POLICY_CHOICES = [policy.value for policy in LinkPolicy]
LIST_ACTION_CHOICES = ["add", "remove", "list", "clear"]

MANAGE_GUILD = discord.Permissions(manage_guild=True)


def format_settings(settings: GuildSettings) -> str:
    """Render the read-only summary shown by /settings."""
    lines = ["**Modes:**"]
    if settings.channel_modes:
        lines.append("\n".join(f"• <#{channel_id}> → **{mode}**" for channel_id, mode in settings.channel_modes.items()))
    else:
        lines.append("(none)")
    lines.append("")
    lines.append(f"**Whitelist:** {', '.join(settings.whitelist) if settings.whitelist else '(empty)'}")
    bypass = ", ".join(f"<@&{role_id}>" for role_id in settings.bypass_roles)
    lines.append(f"**Bypass roles:** {bypass or '(none)'}")
    lines.append(f"**Link policy:** {settings.policy}")
    return "\n".join(lines)


def format_probe(text: str) -> str:
    """Render the /test answer for ``text``."""
    domains = extract_domains(text)
    return (
        f"Has URL: **{'yes' if has_link(text) else 'no'}**\n"
        f"Domains: {', '.join(domains) if domains else '(none)'}"
    )


class GuildSettingsCog(commands.Cog):
    """Slash commands that read and change a guild's link moderation settings."""

    mode = discord.SlashCommandGroup(
        "mode",
        "Set or view the moderation mode for a channel",
        default_member_permissions=MANAGE_GUILD,
    )

    def __init__(self, discord_bot_instance, settings_manager: GuildSettingsManager, cleanup_default_limit: int = 50):
        """Store the bot reference and the settings store shared with the listeners."""
        self.discord_bot_instance = discord_bot_instance
        self.settings_manager = settings_manager
        self.cleanup_default_limit = cleanup_default_limit
        logger.info("Settings cog loaded")

    async def _ensure_guild_context(self, ctx: discord.ApplicationContext) -> bool:
        if not ctx.guild_id:
            await ctx.respond("Guild only.", ephemeral=True)
            return False
        return True

    async def _ensure_manage_guild(self, ctx: discord.ApplicationContext) -> bool:
        if not await self._ensure_guild_context(ctx):
            return False
        if not has_permissions(ctx, manage_guild=True):
            await ctx.respond("You need the Manage Server permission to configure Bloz.", ephemeral=True)
            return False
        return True

    # -------- /mode --------
    @mode.command(name="set", description="Set the moderation mode for a channel")
    async def mode_set(
        self,
        ctx: discord.ApplicationContext,
        mode: Option(str, "off | links-only | no-links", choices=MODE_CHOICES, required=True),  # type: ignore
        channel: Option(discord.abc.GuildChannel, "Target channel or thread (defaults to current)", required=False, default=None),  # type: ignore
    ) -> None:
        if not await self._ensure_manage_guild(ctx):
            return

        channel_mode = ChannelMode.parse(mode)
        if channel_mode is None:
            await ctx.respond("Invalid mode.", ephemeral=True)
            return

        target = channel or ctx.channel
        self.settings_manager.set_channel_mode(ctx.guild_id, target.id, channel_mode)
        logger.info("Mode for channel %s in guild %s set to %s by %s", target.id, ctx.guild_id, channel_mode, ctx.user)
        await ctx.respond(f"Mode for <#{target.id}> set to **{channel_mode}**.", ephemeral=True)

    @mode.command(name="view", description="Show the moderation mode of a channel")
    async def mode_view(
        self,
        ctx: discord.ApplicationContext,
        channel: Option(discord.abc.GuildChannel, "Target channel or thread (defaults to current)", required=False, default=None),  # type: ignore
    ) -> None:
        if not await self._ensure_manage_guild(ctx):
            return

        target = channel or ctx.channel
        channel_mode = self.settings_manager.get_guild_settings(ctx.guild_id).mode_for(target.id)
        await ctx.respond(f"Mode for <#{target.id}> is **{channel_mode}**.", ephemeral=True)

    # -------- /whitelist --------
    @commands.slash_command(
        name="whitelist",
        description="Manage allowed link domains",
        default_member_permissions=MANAGE_GUILD,
    )
    async def whitelist(
        self,
        ctx: discord.ApplicationContext,
        action: Option(str, "add | remove | list | clear", choices=LIST_ACTION_CHOICES, required=True),  # type: ignore
        domain: Option(str, "e.g. youtube.com, discord.gg", required=False, default=None),  # type: ignore
    ) -> None:
        if not await self._ensure_manage_guild(ctx):
            return

        guild_id = ctx.guild_id
        normalized = normalize_domain(domain)

        if action == "add":
            if not normalized:
                await ctx.respond("Provide a domain like `youtube.com`.", ephemeral=True)
                return
            self.settings_manager.add_whitelist_domain(guild_id, normalized)
            await ctx.respond(f"Added **{normalized}** to whitelist.", ephemeral=True)
        elif action == "remove":
            if not normalized:
                await ctx.respond("Provide a domain to remove.", ephemeral=True)
                return
            self.settings_manager.remove_whitelist_domain(guild_id, normalized)
            await ctx.respond(f"Removed **{normalized}** from whitelist.", ephemeral=True)
        elif action == "list":
            whitelist = self.settings_manager.get_guild_settings(guild_id).whitelist
            listing = "\n".join(f"• {entry}" for entry in whitelist) if whitelist else "(empty)"
            await ctx.respond(f"**Allowed domains:**\n{listing}", ephemeral=True)
        elif action == "clear":
            self.settings_manager.clear_whitelist(guild_id)
            await ctx.respond("Whitelist cleared.", ephemeral=True)
        else:
            await ctx.respond("Unsupported action.", ephemeral=True)

    # -------- /bypass --------
    @commands.slash_command(
        name="bypass",
        description="Manage bypass roles (members with these roles are ignored by moderation)",
        default_member_permissions=MANAGE_GUILD,
    )
    async def bypass(
        self,
        ctx: discord.ApplicationContext,
        action: Option(str, "add | remove | list | clear", choices=LIST_ACTION_CHOICES, required=True),  # type: ignore
        role: Option(discord.Role, "Role to add/remove", required=False, default=None),  # type: ignore
    ) -> None:
        if not await self._ensure_manage_guild(ctx):
            return

        guild_id = ctx.guild_id

        if action == "add":
            if role is None:
                await ctx.respond("Pick a role to add.", ephemeral=True)
                return
            self.settings_manager.add_bypass_role(guild_id, role.id)
            await ctx.respond(f"Added bypass role: <@&{role.id}>.", ephemeral=True)
        elif action == "remove":
            if role is None:
                await ctx.respond("Pick a role to remove.", ephemeral=True)
                return
            self.settings_manager.remove_bypass_role(guild_id, role.id)
            await ctx.respond(f"Removed bypass role: <@&{role.id}>.", ephemeral=True)
        elif action == "list":
            roles = self.settings_manager.get_guild_settings(guild_id).bypass_roles
            listing = "\n".join(f"• <@&{role_id}>" for role_id in roles) if roles else "(none)"
            await ctx.respond(f"**Bypass roles:**\n{listing}", ephemeral=True)
        elif action == "clear":
            self.settings_manager.clear_bypass_roles(guild_id)
            await ctx.respond("Bypass roles cleared.", ephemeral=True)
        else:
            await ctx.respond("Unsupported action.", ephemeral=True)

    # -------- /policy --------
    @commands.slash_command(
        name="policy",
        description="Choose how links-only channels judge messages",
        default_member_permissions=MANAGE_GUILD,
    )
    async def policy(
        self,
        ctx: discord.ApplicationContext,
        policy: Option(str, "standard | single-link", choices=POLICY_CHOICES, required=True),  # type: ignore
    ) -> None:
        if not await self._ensure_manage_guild(ctx):
            return

        link_policy = LinkPolicy.parse(policy)
        if link_policy is None:
            await ctx.respond("Invalid policy.", ephemeral=True)
            return

        self.settings_manager.set_policy(ctx.guild_id, link_policy)
        await ctx.respond(f"Link policy set to **{link_policy}**.", ephemeral=True)

    # -------- /settings --------
    @commands.slash_command(
        name="settings",
        description="Show current settings for this server",
        default_member_permissions=MANAGE_GUILD,
    )
    async def settings(self, ctx: discord.ApplicationContext) -> None:
        if not await self._ensure_manage_guild(ctx):
            return
        guild_settings = self.settings_manager.get_guild_settings(ctx.guild_id)
        await ctx.respond(format_settings(guild_settings), ephemeral=True)

    # -------- /test --------
    @commands.slash_command(name="test", description="Test the detector against some text")
    async def test(
        self,
        ctx: discord.ApplicationContext,
        text: Option(str, "Paste text", required=True),  # type: ignore
    ) -> None:
        await ctx.respond(format_probe(text), ephemeral=True)

    # -------- /cleanup --------
    @commands.slash_command(
        name="cleanup",
        description="Delete recent messages that are not a single allowed link",
        default_member_permissions=discord.Permissions(manage_messages=True),
    )
    async def cleanup(
        self,
        ctx: discord.ApplicationContext,
        limit: Option(int, "How many recent messages to scan (1-100)", min_value=MIN_CLEANUP_LIMIT, max_value=MAX_CLEANUP_LIMIT, required=False, default=None),  # type: ignore
    ) -> None:
        if not await self._ensure_guild_context(ctx):
            return
        if not has_permissions(ctx, manage_messages=True):
            await ctx.respond("You need the Manage Messages permission to run a cleanup.", ephemeral=True)
            return

        await ctx.defer(ephemeral=True)
        scan_limit = limit if limit is not None else self.cleanup_default_limit
        guild_settings = self.settings_manager.get_guild_settings(ctx.guild_id)
        deleted = await run_cleanup(ctx.channel, guild_settings, scan_limit)
        logger.info("Cleanup by %s in channel %s removed %d message(s)", ctx.user, ctx.channel.id, deleted)
        await ctx.send_followup(f"Cleanup done: deleted **{deleted}** message(s).", ephemeral=True)


def setup(discord_bot_instance, settings_manager: GuildSettingsManager, cleanup_default_limit: int = 50):
    """Add the settings cog to the supplied Discord bot instance."""
    discord_bot_instance.add_cog(GuildSettingsCog(discord_bot_instance, settings_manager, cleanup_default_limit))
