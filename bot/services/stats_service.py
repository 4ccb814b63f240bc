"""Stats service tying archive fetching to aggregation."""

import logging
from datetime import datetime, timezone
from typing import Optional

from bot.services.archive_client import ChessComClient
from bot.services.month_resolver import resolve_month_buckets
from bot.services.period import compute_period
from bot.services.stats_aggregator import aggregate
from models import AggregateResult, LastGame, PeriodType

logger = logging.getLogger(__name__)


class StatsService:
    """Service computing a player's stats for a calendar period."""

    def __init__(self, client: ChessComClient):
        self.client = client

    async def compute_stats(
        self,
        username: str,
        period_type: PeriodType,
        reference: Optional[datetime] = None,
    ) -> AggregateResult:
        """Compute stats for the period of ``period_type`` containing ``reference``.

        ``reference`` defaults to now. Unavailable months only reduce the
        counts; a DataConsistencyError from aggregation is propagated.
        """
        now = datetime.now(timezone.utc)
        reference = reference or now
        period = compute_period(period_type, reference)
        logger.info(f"=== Calculating stats for {username} ({period_type.value}) ===")
        logger.info(f"Period start: {period.start.isoformat()}, end: {period.end.isoformat()}")

        buckets = resolve_month_buckets(period.type, period.start, period.end, now)
        games = await self.client.fetch_all(username, buckets)
        result = aggregate(username, games, period.start, period.end)

        logger.info(f"Games in period for {username}: {result.total_games} (of {len(games)} fetched)")
        return result

    async def get_last_game(self, username: str) -> Optional[LastGame]:
        """Get the most recent game for a player, or None if unavailable."""
        return await self.client.fetch_last_game(username)
