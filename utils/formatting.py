"""Message formatting utilities for chat replies."""

import re

from models import AggregateResult, LastGame, PeriodType, TimeControlClass

# Discord message limit
DISCORD_MAX_LENGTH = 2000

PERIOD_NAMES = {
    PeriodType.DAILY: "today",
    PeriodType.WEEKLY: "this week",
    PeriodType.MONTHLY: "this month",
    PeriodType.YEARLY: "this year",
}

PGN_HEADER_PATTERN = re.compile(r"\[.*?\]\n")
PGN_COMMENT_PATTERN = re.compile(r"\{.*?\}")
PGN_BLACK_MOVE_NUMBER_PATTERN = re.compile(r"\d+\.\.\.")
WHITESPACE_PATTERN = re.compile(r"\s+")


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def truncate(text: str, limit: int = DISCORD_MAX_LENGTH) -> str:
    """Truncate text so it fits in a single Discord message."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def format_rating_change(result: AggregateResult, time_class: TimeControlClass) -> str:
    """Format the rating clause for a class, or an empty string if unknown."""
    change = result.rating_change(time_class)
    if change is None:
        return ""
    sign = "+" if change >= 0 else ""
    return f", rating: {sign}{change} ({result.start_rating[time_class]} -> {result.end_rating[time_class]})"


def format_stats_message(username: str, period_type: PeriodType, result: AggregateResult) -> str:
    """Format a stats summary.

    Example:
        alice has played 3 games this week. 1 Rapid game, rating: +8 (1200 -> 1208),
        2 Blitz games, rating: -5 (1500 -> 1495), 0 Bullet games
    """
    class_parts = []
    for time_class in TimeControlClass:
        count = result.per_class[time_class].count
        label = pluralize(count, f"{time_class.value.capitalize()} game")
        class_parts.append(f"{label}{format_rating_change(result, time_class)}")

    total = pluralize(result.total_games, "game")
    message = f"{username} has played {total} {PERIOD_NAMES[period_type]}. {', '.join(class_parts)}"
    return truncate(message)


def clean_pgn(pgn: str) -> str:
    """Strip headers, comments and black move numbers from a PGN, leaving the move text."""
    pgn = PGN_HEADER_PATTERN.sub("", pgn or "")
    pgn = PGN_COMMENT_PATTERN.sub("", pgn)
    pgn = PGN_BLACK_MOVE_NUMBER_PATTERN.sub("", pgn)
    return WHITESPACE_PATTERN.sub(" ", pgn).strip()


def format_last_game_message(last_game: LastGame) -> str:
    """Format the most recent game summary with its cleaned move list."""
    header = f"{last_game.username} has played as {last_game.color} and {last_game.outcome} most recent game:"
    moves = clean_pgn(last_game.pgn)
    if not moves:
        return header
    return truncate(f"{header}\n{moves}")
