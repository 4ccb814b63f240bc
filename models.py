"""Pydantic models for chess stats data structures."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TimeControlClass(str, Enum):
    """Game speed categories tracked by the bot."""

    RAPID = "rapid"
    BLITZ = "blitz"
    BULLET = "bullet"


class PeriodType(str, Enum):
    """Calendar windows a stats request can cover."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Period(BaseModel):
    """An inclusive UTC time window."""

    model_config = ConfigDict(frozen=True)

    type: PeriodType
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "Period":
        if self.start > self.end:
            raise ValueError(f"Period start {self.start} is after end {self.end}")
        return self


class MonthBucket(BaseModel):
    """A single (year, month) unit of archived games."""

    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)

    @classmethod
    def containing(cls, moment: datetime) -> "MonthBucket":
        return cls(year=moment.year, month=moment.month)

    def previous(self) -> "MonthBucket":
        if self.month == 1:
            return MonthBucket(year=self.year - 1, month=12)
        return MonthBucket(year=self.year, month=self.month - 1)

    def next(self) -> "MonthBucket":
        if self.month == 12:
            return MonthBucket(year=self.year + 1, month=1)
        return MonthBucket(year=self.year, month=self.month + 1)

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month)

    def __lt__(self, other: "MonthBucket") -> bool:
        return self.key < other.key

    def __le__(self, other: "MonthBucket") -> bool:
        return self.key <= other.key

    def __str__(self) -> str:
        return f"{self.year}/{self.month:02d}"


class PlayerSide(BaseModel):
    """One participant of a game as reported by the archive."""

    model_config = ConfigDict(frozen=True)

    username: str
    rating: int
    result: str = ""


class GameRecord(BaseModel):
    """A finished game from a monthly archive."""

    model_config = ConfigDict(frozen=True)

    end_time: datetime
    time_class: TimeControlClass
    white: PlayerSide
    black: PlayerSide
    pgn: str = ""


class ClassStats(BaseModel):
    """Per time-control counters for a period."""

    count: int = 0


class AggregateResult(BaseModel):
    """Statistics for one user over one period."""

    per_class: dict[TimeControlClass, ClassStats]
    start_rating: dict[TimeControlClass, Optional[int]]
    end_rating: dict[TimeControlClass, Optional[int]]
    games_in_period: list[GameRecord] = Field(default_factory=list)

    @property
    def total_games(self) -> int:
        return len(self.games_in_period)

    def rating_change(self, time_class: TimeControlClass) -> Optional[int]:
        """Net rating change for a class, or None when it can't be derived."""
        start = self.start_rating[time_class]
        end = self.end_rating[time_class]
        if self.per_class[time_class].count == 0 or start is None or end is None:
            return None
        return end - start


class LastGame(BaseModel):
    """Summary of a player's most recent game."""

    username: str
    color: str
    outcome: str
    time_class: str = ""
    pgn: str = ""


class JoinedChannel(BaseModel):
    """A channel the bot has been asked to answer in."""

    guild_id: str
    channel_id: str
    joined_at: Optional[datetime] = None

