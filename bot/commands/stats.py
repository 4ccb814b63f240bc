"""Chess stats commands for Chessburger."""

import logging
import re
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from models import PeriodType
from utils.formatting import format_last_game_message, format_stats_message

if TYPE_CHECKING:
    from bot.main import ChessburgerBot

logger = logging.getLogger(__name__)

# Chess.com usernames are letters, digits, underscores and hyphens
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,50}$")


def is_valid_username(username: str) -> bool:
    return bool(USERNAME_PATTERN.match(username))


class StatsCommands(commands.Cog):
    """Cog containing the chess stats commands."""

    bot: "ChessburgerBot"

    def __init__(self, bot: "ChessburgerBot"):
        self.bot = bot

    async def _check_access(self, interaction: discord.Interaction) -> str | None:
        """Return an error message if the command may not run here, else None."""
        if not interaction.guild or not self.bot.db or not self.bot.stats_service:
            return "This command only works in servers."

        guild_id = str(interaction.guild.id)
        if await self.bot.db.is_user_banned(guild_id, str(interaction.user.id)):
            return "You are not allowed to use Chessburger in this server."
        if not await self.bot.db.is_channel_joined(guild_id, str(interaction.channel_id)):
            return "Chessburger isn't active in this channel. Ask a moderator to use `/join`."
        return None

    async def _send_stats(self, interaction: discord.Interaction, username: str, period_type: PeriodType):
        channel_name = getattr(interaction.channel, "name", "DM")
        logger.info(f"{period_type.value} stats for {username} requested by {interaction.user} in #{channel_name}")

        error = await self._check_access(interaction)
        if error:
            await interaction.response.send_message(error, ephemeral=True)
            return
        if not is_valid_username(username):
            await interaction.response.send_message(f"`{username}` is not a valid Chess.com username.", ephemeral=True)
            return

        await interaction.response.defer()

        try:
            result = await self.bot.stats_service.compute_stats(username, period_type)
        except Exception:
            logger.exception(f"Error fetching stats for {username}")
            await interaction.followup.send(f"Error fetching stats for {username}")
            return

        await interaction.followup.send(format_stats_message(username, period_type, result))

    @app_commands.command(name="daily", description="Show a player's Chess.com games and rating change today")
    @app_commands.describe(username="Chess.com username")
    async def daily(self, interaction: discord.Interaction, username: str):
        await self._send_stats(interaction, username, PeriodType.DAILY)

    @app_commands.command(name="weekly", description="Show a player's Chess.com games and rating change this week")
    @app_commands.describe(username="Chess.com username")
    async def weekly(self, interaction: discord.Interaction, username: str):
        await self._send_stats(interaction, username, PeriodType.WEEKLY)

    @app_commands.command(name="monthly", description="Show a player's Chess.com games and rating change this month")
    @app_commands.describe(username="Chess.com username")
    async def monthly(self, interaction: discord.Interaction, username: str):
        await self._send_stats(interaction, username, PeriodType.MONTHLY)

    @app_commands.command(name="yearly", description="Show a player's Chess.com games and rating change this year")
    @app_commands.describe(username="Chess.com username")
    async def yearly(self, interaction: discord.Interaction, username: str):
        await self._send_stats(interaction, username, PeriodType.YEARLY)

    @app_commands.command(name="recent", description="Show a player's most recent Chess.com game")
    @app_commands.describe(username="Chess.com username")
    async def recent(self, interaction: discord.Interaction, username: str):
        """Show the most recent game with its move list."""
        logger.info(f"Recent game for {username} requested by {interaction.user}")

        error = await self._check_access(interaction)
        if error:
            await interaction.response.send_message(error, ephemeral=True)
            return
        if not is_valid_username(username):
            await interaction.response.send_message(f"`{username}` is not a valid Chess.com username.", ephemeral=True)
            return

        await interaction.response.defer()

        try:
            last_game = await self.bot.stats_service.get_last_game(username)
        except Exception:
            logger.exception(f"Error fetching last game for {username}")
            await interaction.followup.send(f"Error fetching last game for {username}.")
            return

        if not last_game:
            await interaction.followup.send(f"No recent games found for {username}.")
            return

        await interaction.followup.send(format_last_game_message(last_game))

    @app_commands.command(name="chessburger", description="Show help for Chessburger")
    async def help(self, interaction: discord.Interaction):
        """Show help information."""
        help_text = """
**Chessburger**

Chess.com stats for your server.

**Stats:**
- `/daily <username>` - Games and rating change today
- `/weekly <username>` - Games and rating change since Monday
- `/monthly <username>` - Games and rating change this month
- `/yearly <username>` - Games and rating change this year
- `/recent <username>` - The most recent game and its moves

**Moderation (Manage Server):**
- `/join` - Answer commands in this channel
- `/leave` - Stop answering commands in this channel
- `/ban <user>` / `/unban <user>` - Block or unblock a user from the bot

All periods are in UTC.
"""
        await interaction.response.send_message(help_text, ephemeral=True)


async def setup(bot: "ChessburgerBot"):
    """Load the cog."""
    await bot.add_cog(StatsCommands(bot))
