"""Chess.com archive client for fetching a player's monthly game lists."""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any, Optional

import aiohttp

from bot.services.stats_aggregator import DataConsistencyError
from config import Config
from models import GameRecord, LastGame, MonthBucket, PlayerSide, TimeControlClass

logger = logging.getLogger(__name__)

SUPPORTED_TIME_CLASSES = {tc.value for tc in TimeControlClass}

# Chess.com result codes that end a game without a winner
DRAW_RESULTS = {
    "agreed",
    "repetition",
    "stalemate",
    "insufficient",
    "50move",
    "timevsinsufficient",
}


class ArchiveFetchError(Exception):
    """Raised when an archive request returns a non-success status."""

    def __init__(self, url: str, status: int, reason: str = ""):
        super().__init__(f"GET {url} failed: {status} {reason}".strip())
        self.url = url
        self.status = status


def parse_games(payload: Any) -> list[GameRecord]:
    """Parse a monthly archive payload into game records.

    Games of unsupported time classes (e.g. daily correspondence) are skipped.
    Raises ValueError if the payload doesn't look like an archive.
    """
    if not isinstance(payload, dict):
        raise ValueError(f"Expected an object, got {type(payload).__name__}")
    raw_games = payload.get("games", [])
    if not isinstance(raw_games, list):
        raise ValueError("'games' is not a list")

    games = []
    for raw in raw_games:
        if not isinstance(raw, dict):
            raise ValueError("Game entry is not an object")
        time_class = raw.get("time_class")
        if not isinstance(time_class, str):
            raise ValueError(f"time_class is not a string: {time_class!r}")
        if time_class not in SUPPORTED_TIME_CLASSES:
            continue
        games.append(GameRecord.model_validate(raw))
    return games


def summarize_last_game(username: str, raw: dict) -> LastGame:
    """Build a LastGame summary from a raw archive game."""
    white = PlayerSide.model_validate(raw["white"])
    black = PlayerSide.model_validate(raw["black"])
    name = username.lower()
    if white.username.lower() == name:
        color, side = "white", white
    elif black.username.lower() == name:
        color, side = "black", black
    else:
        raise DataConsistencyError(username, white.username, black.username)

    if side.result == "win":
        outcome = "won"
    elif side.result in DRAW_RESULTS:
        outcome = "drew"
    else:
        outcome = "lost"

    return LastGame(
        username=username,
        color=color,
        outcome=outcome,
        time_class=raw.get("time_class", ""),
        pgn=raw.get("pgn", ""),
    )


class ChessComClient:
    """Async client for the Chess.com public game archives."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
    ):
        self.session = session
        self.base_url = (base_url or Config.CHESSCOM_API_BASE).rstrip("/")
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else Config.FETCH_TIMEOUT_SECONDS

    def month_url(self, username: str, bucket: MonthBucket) -> str:
        return f"{self.base_url}/player/{username.lower()}/games/{bucket.year}/{bucket.month:02d}"

    def archives_url(self, username: str) -> str:
        return f"{self.base_url}/player/{username.lower()}/games/archives"

    async def _get_json(self, url: str) -> Any:
        async with self.session.get(url) as response:
            if not response.ok:
                body = await response.text()
                logger.debug(f"API response for {url}: {body[:200]}")
                raise ArchiveFetchError(url, response.status, response.reason or "")
            return await response.json()

    async def _get_json_bounded(self, url: str) -> Any:
        return await asyncio.wait_for(self._get_json(url), timeout=self.timeout_seconds)

    async def fetch_month(self, username: str, bucket: MonthBucket) -> list[GameRecord]:
        """Fetch one month of games.

        Any failure is logged and yields an empty list so one missing month
        only undercounts instead of failing the whole request.
        """
        url = self.month_url(username, bucket)
        logger.info(f"Fetching games for {username} {bucket}...")
        try:
            payload = await self._get_json_bounded(url)
            return parse_games(payload)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out fetching {bucket} for {username} after {self.timeout_seconds}s")
        except ArchiveFetchError as e:
            logger.warning(f"Failed to fetch {bucket} for {username}: {e}")
        except aiohttp.ClientError as e:
            logger.warning(f"Error fetching {bucket} for {username}: {e}")
        except (ValueError, TypeError) as e:  # includes pydantic ValidationError
            logger.warning(f"Malformed archive {bucket} for {username}: {e}")
        return []

    async def fetch_all(self, username: str, buckets: Iterable[MonthBucket]) -> list[GameRecord]:
        """Fetch every bucket concurrently and concatenate the games.

        Duplicate buckets are requested only once, since games carry no
        identity and would otherwise be counted twice.
        """
        unique = list(dict.fromkeys(buckets))
        results = await asyncio.gather(*(self.fetch_month(username, bucket) for bucket in unique))
        games = [game for month_games in results for game in month_games]
        logger.info(f"Fetched {len(games)} games for {username} across {len(unique)} month(s)")
        return games

    async def fetch_last_game(self, username: str) -> Optional[LastGame]:
        """Fetch the most recent game from the newest archive, or None."""
        logger.info(f"Fetching last game for {username}...")
        try:
            data = await self._get_json_bounded(self.archives_url(username))
            archives = data.get("archives") if isinstance(data, dict) else None
            if not archives:
                logger.info(f"No archives found for {username}")
                return None

            latest_url = archives[-1]
            logger.info(f"Fetching latest archive: {latest_url}")
            archive = await self._get_json_bounded(latest_url)
            games = archive.get("games") if isinstance(archive, dict) else None
            if not games:
                logger.info(f"No games found in latest archive for {username}")
                return None

            return summarize_last_game(username, games[-1])
        except asyncio.TimeoutError:
            logger.warning(f"Timed out fetching last game for {username}")
        except (ArchiveFetchError, aiohttp.ClientError) as e:
            logger.warning(f"Failed to fetch last game for {username}: {e}")
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Malformed last game for {username}: {e}")
        return None
