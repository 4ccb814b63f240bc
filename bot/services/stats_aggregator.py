"""Aggregate a player's games into per time-control period statistics."""

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from models import AggregateResult, ClassStats, GameRecord, PlayerSide, TimeControlClass

logger = logging.getLogger(__name__)


class DataConsistencyError(Exception):
    """Raised when a game doesn't involve the player whose stats are requested."""

    def __init__(self, username: str, white: str, black: str):
        super().__init__(f"Game between {white!r} and {black!r} does not involve {username!r}")
        self.username = username
        self.white = white
        self.black = black


def subject_side(game: GameRecord, username: str) -> PlayerSide:
    """Return the side of the game played by ``username`` (case-insensitive)."""
    name = username.lower()
    if game.white.username.lower() == name:
        return game.white
    if game.black.username.lower() == name:
        return game.black
    raise DataConsistencyError(username, game.white.username, game.black.username)


def rating_for(game: GameRecord, username: str) -> int:
    return subject_side(game, username).rating


def aggregate(
    username: str,
    games: Iterable[GameRecord],
    period_start: datetime,
    period_end: datetime,
) -> AggregateResult:
    """Compute per-class counts and start/end ratings for a period.

    The start rating comes from the last game before the period; if the
    player has no earlier game of that class, the first game inside the
    period is used instead. The end rating comes from the last game inside
    the period and is None when none was played.

    Raises DataConsistencyError if a game used for a rating doesn't involve
    ``username``.
    """
    ordered = sorted(games, key=lambda g: g.end_time)
    games_in_period = [g for g in ordered if period_start <= g.end_time <= period_end]

    per_class: dict[TimeControlClass, ClassStats] = {}
    start_rating: dict[TimeControlClass, Optional[int]] = {}
    end_rating: dict[TimeControlClass, Optional[int]] = {}

    for time_class in TimeControlClass:
        class_games = [g for g in games_in_period if g.time_class == time_class]
        last_before = next(
            (g for g in reversed(ordered) if g.time_class == time_class and g.end_time < period_start),
            None,
        )

        per_class[time_class] = ClassStats(count=len(class_games))

        if last_before is not None:
            start_rating[time_class] = rating_for(last_before, username)
        elif class_games:
            start_rating[time_class] = rating_for(class_games[0], username)
        else:
            start_rating[time_class] = None

        end_rating[time_class] = rating_for(class_games[-1], username) if class_games else None

    logger.debug(f"Start ratings for {username}: {start_rating}")
    logger.debug(f"End ratings for {username}: {end_rating}")

    return AggregateResult(
        per_class=per_class,
        start_rating=start_rating,
        end_rating=end_rating,
        games_in_period=games_in_period,
    )
