"""Tests for the stats slash commands."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bot.commands.stats import StatsCommands, is_valid_username
from bot.services.stats_aggregator import DataConsistencyError
from models import AggregateResult, ClassStats, LastGame, PeriodType, TimeControlClass


def empty_result() -> AggregateResult:
    return AggregateResult(
        per_class={tc: ClassStats() for tc in TimeControlClass},
        start_rating={tc: None for tc in TimeControlClass},
        end_rating={tc: None for tc in TimeControlClass},
    )


@pytest.fixture
def mock_bot():
    bot = MagicMock()
    bot.db = MagicMock()
    bot.db.is_user_banned = AsyncMock(return_value=False)
    bot.db.is_channel_joined = AsyncMock(return_value=True)
    bot.stats_service = MagicMock()
    bot.stats_service.compute_stats = AsyncMock(return_value=empty_result())
    bot.stats_service.get_last_game = AsyncMock(return_value=None)
    return bot


@pytest.fixture
def mock_interaction():
    interaction = MagicMock()
    interaction.guild.id = 123
    interaction.channel_id = 456
    interaction.channel.name = "chess"
    interaction.user.id = 789
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


class TestIsValidUsername:
    def test_valid(self):
        assert is_valid_username("Hikaru")
        assert is_valid_username("magnus_carlsen-99")

    def test_invalid(self):
        assert not is_valid_username("")
        assert not is_valid_username("../admin")
        assert not is_valid_username("a b")


class TestSendStats:
    @pytest.mark.asyncio
    async def test_replies_with_stats(self, mock_bot, mock_interaction):
        cog = StatsCommands(mock_bot)

        await cog._send_stats(mock_interaction, "alice", PeriodType.WEEKLY)

        mock_bot.stats_service.compute_stats.assert_awaited_once_with("alice", PeriodType.WEEKLY)
        message = mock_interaction.followup.send.await_args.args[0]
        assert message.startswith("alice has played 0 games this week.")

    @pytest.mark.asyncio
    async def test_banned_user_rejected(self, mock_bot, mock_interaction):
        mock_bot.db.is_user_banned.return_value = True
        cog = StatsCommands(mock_bot)

        await cog._send_stats(mock_interaction, "alice", PeriodType.DAILY)

        mock_bot.stats_service.compute_stats.assert_not_awaited()
        assert mock_interaction.response.send_message.await_args.kwargs["ephemeral"] is True

    @pytest.mark.asyncio
    async def test_unjoined_channel_rejected(self, mock_bot, mock_interaction):
        mock_bot.db.is_channel_joined.return_value = False
        cog = StatsCommands(mock_bot)

        await cog._send_stats(mock_interaction, "alice", PeriodType.DAILY)

        mock_bot.stats_service.compute_stats.assert_not_awaited()
        assert "/join" in mock_interaction.response.send_message.await_args.args[0]

    @pytest.mark.asyncio
    async def test_invalid_username_rejected(self, mock_bot, mock_interaction):
        cog = StatsCommands(mock_bot)

        await cog._send_stats(mock_interaction, "bad/name", PeriodType.DAILY)

        mock_bot.stats_service.compute_stats.assert_not_awaited()
        assert "not a valid" in mock_interaction.response.send_message.await_args.args[0]

    @pytest.mark.asyncio
    async def test_data_error_reported(self, mock_bot, mock_interaction):
        mock_bot.stats_service.compute_stats.side_effect = DataConsistencyError("alice", "carol", "bob")
        cog = StatsCommands(mock_bot)

        await cog._send_stats(mock_interaction, "alice", PeriodType.MONTHLY)

        mock_interaction.followup.send.assert_awaited_once_with("Error fetching stats for alice")

    @pytest.mark.asyncio
    async def test_unexpected_error_still_replies(self, mock_bot, mock_interaction):
        mock_bot.stats_service.compute_stats.side_effect = RuntimeError("Session is closed")
        cog = StatsCommands(mock_bot)

        await cog._send_stats(mock_interaction, "alice", PeriodType.DAILY)

        mock_interaction.followup.send.assert_awaited_once_with("Error fetching stats for alice")


class TestRecent:
    @pytest.mark.asyncio
    async def test_no_recent_game(self, mock_bot, mock_interaction):
        cog = StatsCommands(mock_bot)

        await cog.recent.callback(cog, mock_interaction, "alice")

        mock_interaction.followup.send.assert_awaited_once_with("No recent games found for alice.")

    @pytest.mark.asyncio
    async def test_recent_game(self, mock_bot, mock_interaction):
        mock_bot.stats_service.get_last_game.return_value = LastGame(
            username="alice", color="white", outcome="won", pgn="1. e4 1... e5"
        )
        cog = StatsCommands(mock_bot)

        await cog.recent.callback(cog, mock_interaction, "alice")

        message = mock_interaction.followup.send.await_args.args[0]
        assert message == "alice has played as white and won most recent game:\n1. e4 e5"

    @pytest.mark.asyncio
    async def test_unexpected_error_still_replies(self, mock_bot, mock_interaction):
        mock_bot.stats_service.get_last_game.side_effect = RuntimeError("Session is closed")
        cog = StatsCommands(mock_bot)

        await cog.recent.callback(cog, mock_interaction, "alice")

        mock_interaction.followup.send.assert_awaited_once_with("Error fetching last game for alice.")
