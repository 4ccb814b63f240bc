"""Channel and ban management commands for Chessburger."""

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

if TYPE_CHECKING:
    from bot.main import ChessburgerBot

logger = logging.getLogger(__name__)


class ChannelCommands(commands.Cog):
    """Cog for joining channels and banning users (moderators only)."""

    bot: "ChessburgerBot"

    def __init__(self, bot: "ChessburgerBot"):
        self.bot = bot

    @app_commands.command(name="join", description="Make Chessburger answer commands in this channel")
    @app_commands.checks.has_permissions(manage_guild=True)
    async def join(self, interaction: discord.Interaction):
        if not interaction.guild or not self.bot.db:
            await interaction.response.send_message("This command only works in servers.", ephemeral=True)
            return

        channel_name = getattr(interaction.channel, "name", "unknown")
        joined = await self.bot.db.join_channel(str(interaction.guild.id), str(interaction.channel_id))
        if joined:
            logger.info(f"Joined #{channel_name} in guild {interaction.guild.id}")
            await interaction.response.send_message(f"Chessburger joined #{channel_name}!")
        else:
            await interaction.response.send_message("Chessburger is already active in this channel.", ephemeral=True)

    @app_commands.command(name="leave", description="Stop answering commands in this channel")
    @app_commands.checks.has_permissions(manage_guild=True)
    async def leave(self, interaction: discord.Interaction):
        if not interaction.guild or not self.bot.db:
            await interaction.response.send_message("This command only works in servers.", ephemeral=True)
            return

        channel_name = getattr(interaction.channel, "name", "unknown")
        left = await self.bot.db.leave_channel(str(interaction.guild.id), str(interaction.channel_id))
        if left:
            logger.info(f"Left #{channel_name} in guild {interaction.guild.id}")
            await interaction.response.send_message(f"Chessburger left #{channel_name}.")
        else:
            await interaction.response.send_message("Chessburger isn't active in this channel.", ephemeral=True)

    @app_commands.command(name="ban", description="Block a user from using Chessburger in this server")
    @app_commands.describe(user="The user to block")
    @app_commands.checks.has_permissions(manage_guild=True)
    async def ban(self, interaction: discord.Interaction, user: discord.Member):
        if not interaction.guild or not self.bot.db:
            await interaction.response.send_message("This command only works in servers.", ephemeral=True)
            return

        banned = await self.bot.db.ban_user(str(interaction.guild.id), str(user.id), banned_by=str(interaction.user.id))
        if banned:
            logger.info(f"{interaction.user} banned {user} in guild {interaction.guild.id}")
            await interaction.response.send_message(f"`@{user.display_name}` can no longer use Chessburger here.", ephemeral=True)
        else:
            await interaction.response.send_message(f"`@{user.display_name}` is already banned.", ephemeral=True)

    @app_commands.command(name="unban", description="Allow a blocked user to use Chessburger again")
    @app_commands.describe(user="The user to unblock")
    @app_commands.checks.has_permissions(manage_guild=True)
    async def unban(self, interaction: discord.Interaction, user: discord.Member):
        if not interaction.guild or not self.bot.db:
            await interaction.response.send_message("This command only works in servers.", ephemeral=True)
            return

        unbanned = await self.bot.db.unban_user(str(interaction.guild.id), str(user.id))
        if unbanned:
            logger.info(f"{interaction.user} unbanned {user} in guild {interaction.guild.id}")
            await interaction.response.send_message(f"`@{user.display_name}` can use Chessburger again.", ephemeral=True)
        else:
            await interaction.response.send_message(f"`@{user.display_name}` wasn't banned.", ephemeral=True)

    async def cog_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Handle errors for the moderation commands."""
        if isinstance(error, app_commands.MissingPermissions):
            await interaction.response.send_message(
                "You need the 'Manage Server' permission to use this command!",
                ephemeral=True,
            )
        else:
            logger.error(f"Error in {interaction.command.name if interaction.command else 'command'}: {error}")
            await interaction.response.send_message("An error occurred while running the command.", ephemeral=True)


async def setup(bot: "ChessburgerBot"):
    """Load the cog."""
    await bot.add_cog(ChannelCommands(bot))
