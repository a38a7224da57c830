import asyncio
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest
from slack_sdk.errors import SlackApiError

from wordleturtle.days import reference_tz
from wordleturtle.results import Result
from wordleturtle.storage import StoreError

BOT_NAME = "WordleTurtle"
LA = reference_tz("America/Los_Angeles")


class FakeSlack:
    def __init__(self, names: Dict[str, str], members: Optional[Dict[str, List[str]]] = None):
        self.names = names
        self.members = members or {}
        self.posts: List[tuple] = []
        self.fail_members = False

    async def name_for_user(self, user_id: str) -> str:
        if user_id not in self.names:
            raise SlackApiError("user_not_found", {"ok": False, "error": "user_not_found"})
        return self.names[user_id]

    async def post_message(self, channel: str, text: str) -> None:
        self.posts.append((channel, text))

    async def get_users(self, channel: str) -> List[str]:
        if self.fail_members:
            raise SlackApiError("channel_not_found", {"ok": False, "error": "channel_not_found"})
        return list(self.members.get(channel, []))

    def texts(self, channel: str = "testchannel") -> List[str]:
        return [t for c, t in self.posts if c == channel]


class MemoryStore:
    def __init__(self, results: Optional[List[Result]] = None):
        self.results: List[Result] = list(results or [])
        self.fail_reads = False

    def append(self, result: Result) -> None:
        self.results.append(result)

    def query_by_day(self, puzzle_day: int) -> List[Result]:
        if self.fail_reads:
            raise StoreError("database is locked")
        return [r for r in self.results if r.puzzle_day == puzzle_day]

    def query_max_known_day(self) -> Optional[int]:
        if self.fail_reads:
            raise StoreError("database is locked")
        return max((r.puzzle_day for r in self.results), default=None)


class FakeClock:
    """Clock whose sleep() advances time instantly."""

    def __init__(self, now: datetime):
        self.now = now
        self.sleeps: List[float] = []

    def __call__(self) -> datetime:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now = (self.now.astimezone(timezone.utc) + timedelta(seconds=seconds)).astimezone(self.now.tzinfo)
        await asyncio.sleep(0)


def make_result(user_id: str, name: str, puzzle_day: int, score: int, hard_mode: int = 0) -> Result:
    return Result(puzzle_day=puzzle_day, score=score, hard_mode=hard_mode, user_id=user_id, display_name=name)


@pytest.fixture
def slack():
    return FakeSlack(
        names={"userid1": "sean", "userid2": "lara", "UBOT": BOT_NAME},
        members={"testchannel": ["userid1", "userid2", "UBOT"]},
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def clock():
    # Wordle 917 is Saturday 2023-12-23
    return FakeClock(datetime(2023, 12, 23, 9, 0, tzinfo=LA))
