"""Pytest configuration and shared fixtures."""

import asyncio
import json
from datetime import datetime

import pytest

from models import GameRecord, PlayerSide, TimeControlClass


def raw_game(
    end_time: datetime,
    time_class: str = "blitz",
    white: str = "alice",
    black: str = "bob",
    white_rating: int = 1500,
    black_rating: int = 1500,
    white_result: str = "win",
    black_result: str = "resigned",
    pgn: str = "",
) -> dict:
    """Build a game object shaped like the Chess.com archive payload."""
    return {
        "url": "https://www.chess.com/game/live/1",
        "end_time": int(end_time.timestamp()),
        "time_class": time_class,
        "rated": True,
        "white": {"username": white, "rating": white_rating, "result": white_result},
        "black": {"username": black, "rating": black_rating, "result": black_result},
        "pgn": pgn,
    }


@pytest.fixture
def make_game():
    """Factory for GameRecords where ``rating`` belongs to ``player`` on ``color``."""

    def _make_game(
        end_time: datetime,
        time_class: TimeControlClass = TimeControlClass.BLITZ,
        player: str = "alice",
        rating: int = 1500,
        color: str = "white",
        opponent: str = "bob",
        opponent_rating: int = 1500,
    ) -> GameRecord:
        me = PlayerSide(username=player, rating=rating, result="win")
        them = PlayerSide(username=opponent, rating=opponent_rating, result="resigned")
        white, black = (me, them) if color == "white" else (them, me)
        return GameRecord(end_time=end_time, time_class=time_class, white=white, black=black)

    return _make_game


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(self, status=200, payload=None, raw_text=None, delay=0.0):
        self.status = status
        self.reason = "OK" if 200 <= status < 300 else "Error"
        self._payload = payload
        self._raw_text = raw_text
        self._delay = delay

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def text(self) -> str:
        if self._raw_text is not None:
            return self._raw_text
        return json.dumps(self._payload)

    async def json(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._raw_text is not None:
            return json.loads(self._raw_text)
        return self._payload


class _FakeRequest:
    def __init__(self, outcome):
        self._outcome = outcome

    async def __aenter__(self):
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        return self._outcome

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Minimal stand-in for aiohttp.ClientSession keyed by URL.

    Routes map a URL to a FakeResponse or an exception to raise. Unknown URLs
    return a 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requested: list[str] = []

    def get(self, url, **kwargs):
        self.requested.append(url)
        return _FakeRequest(self.routes.get(url, FakeResponse(status=404, payload={"message": "Not found"})))


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_raw_game():
    return raw_game
