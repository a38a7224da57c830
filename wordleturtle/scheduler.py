"""
Deadline scheduling for each Wordle.

The first result recorded for a puzzle starts one deferred sequence for that
puzzle: a warning one hour before the deadline, then the final tally at the
deadline (plus the weekly leaderboard on the rollup weekday). Each puzzle is
scheduled at most once per process; the set of scheduled puzzles lives in
memory only and starts empty after a restart.
"""
from __future__ import annotations

import asyncio
import threading
from datetime import datetime, tzinfo
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Set, Tuple

from slack_sdk.errors import SlackApiError

from .composer import deadline_message, warning_message
from .config import logger
from .days import date_for_puzzle, deadline_for, is_stale, seconds_between, warning_for
from .leaderboard import DEFAULT_LOOKBACK_DAYS, get_leaderboard_post
from .results import Result
from .slack import SlackConnection
from .standings import missing_players
from .storage import ResultStore, StoreError


class DayPhase(Enum):
    SCHEDULED = "scheduled"
    PRE_DEADLINE_SENT = "pre_deadline_sent"
    COMPLETED = "completed"


class ScheduledDays:
    """Puzzle days whose deadline sequence has been launched. Entries are never removed."""

    def __init__(self) -> None:
        self._days: Set[int] = set()
        self._lock = threading.Lock()

    def add_if_absent(self, puzzle_day: int) -> bool:
        """Atomically claim ``puzzle_day``. Only the first caller gets True."""
        with self._lock:
            if puzzle_day in self._days:
                return False
            self._days.add(puzzle_day)
            return True

    def __contains__(self, puzzle_day: object) -> bool:
        with self._lock:
            return puzzle_day in self._days

    def __len__(self) -> int:
        with self._lock:
            return len(self._days)


class DeadlineScheduler:
    def __init__(
        self,
        store: ResultStore,
        slack: SlackConnection,
        scheduled: ScheduledDays,
        tz: tzinfo,
        bot_name: str,
        deadline_hour: int = 17,
        leaderboard_weekday: int = 6,
        lookback: int = DEFAULT_LOOKBACK_DAYS,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.store = store
        self.slack = slack
        self.scheduled = scheduled
        self.tz = tz
        self.bot_name = bot_name
        self.deadline_hour = deadline_hour
        self.leaderboard_weekday = leaderboard_weekday
        self.lookback = lookback
        self._clock = clock or (lambda: datetime.now(self.tz))
        self._sleep = sleep
        # In-flight sequences only; entries are dropped once a sequence ends
        self.tasks: Dict[int, asyncio.Task] = {}
        self.phases: Dict[int, DayPhase] = {}

    def now(self) -> datetime:
        return self._clock()

    def phase(self, puzzle_day: int) -> Optional[DayPhase]:
        """Current phase of ``puzzle_day``; None if it was never scheduled."""
        if puzzle_day in self.phases:
            return self.phases[puzzle_day]
        return DayPhase.COMPLETED if puzzle_day in self.scheduled else None

    def schedule(self, channel: str, puzzle_day: int) -> bool:
        """Launch the deadline sequence for ``puzzle_day`` unless it is stale or already launched."""
        now = self.now()
        if is_stale(puzzle_day, now, self.tz):
            logger.info(f"Not scheduling Wordle {puzzle_day}: {date_for_puzzle(puzzle_day)} is too far in the past")
            return False
        if not self.scheduled.add_if_absent(puzzle_day):
            return False

        self.phases[puzzle_day] = DayPhase.SCHEDULED
        task = asyncio.create_task(self._run(channel, puzzle_day), name=f"wordle-deadline-{puzzle_day}")
        task.add_done_callback(lambda t, day=puzzle_day: self._finished(day, t))
        self.tasks[puzzle_day] = task
        logger.info(f"Scheduled deadline sequence for Wordle {puzzle_day} in {channel}")
        return True

    async def wait(self, puzzle_day: int) -> None:
        task = self.tasks.get(puzzle_day)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def wait_all(self) -> None:
        if self.tasks:
            await asyncio.gather(*self.tasks.values(), return_exceptions=True)

    def _finished(self, puzzle_day: int, task: asyncio.Task) -> None:
        self.tasks.pop(puzzle_day, None)
        self.phases.pop(puzzle_day, None)
        if task.cancelled():
            logger.warning(f"{task.get_name()} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"{task.get_name()} failed: {exc}", exc_info=exc)

    async def _sleep_until(self, when: datetime) -> None:
        delay = seconds_between(self.now(), when)
        if delay > 0:
            logger.debug(f"Sleeping {delay:.0f}s until {when.isoformat()}")
            await self._sleep(delay)

    async def _day_state(self, channel: str, puzzle_day: int) -> Tuple[List[Result], List[str]]:
        dailies = await asyncio.to_thread(self.store.query_by_day, puzzle_day)
        members = await self.slack.get_users(channel)
        missing = await missing_players(self.slack, members, dailies, self.bot_name)
        return dailies, missing

    async def _run(self, channel: str, puzzle_day: int) -> None:
        now = self.now()
        deadline = deadline_for(puzzle_day, now, self.tz, self.deadline_hour)
        warning_at = warning_for(deadline)

        if seconds_between(now, warning_at) > 0:
            await self._sleep_until(warning_at)
            await self._send_warning(channel, puzzle_day)
        else:
            logger.info(f"Skipping one-hour warning for Wordle {puzzle_day}, {warning_at.isoformat()} already passed")
        self.phases[puzzle_day] = DayPhase.PRE_DEADLINE_SENT

        await self._sleep_until(deadline)
        await self._send_final(channel, puzzle_day)
        self.phases[puzzle_day] = DayPhase.COMPLETED

    async def _send_warning(self, channel: str, puzzle_day: int) -> None:
        try:
            dailies, missing = await self._day_state(channel, puzzle_day)
            await self.slack.post_message(channel, warning_message(puzzle_day, dailies, missing))
        except (StoreError, SlackApiError) as e:
            logger.error(f"Could not send one-hour warning for Wordle {puzzle_day}: {e}")

    async def _send_final(self, channel: str, puzzle_day: int) -> None:
        try:
            dailies, missing = await self._day_state(channel, puzzle_day)
            await self.slack.post_message(channel, deadline_message(puzzle_day, dailies, missing))
        except (StoreError, SlackApiError) as e:
            logger.error(f"Could not send final results for Wordle {puzzle_day}: {e}")

        if date_for_puzzle(puzzle_day).weekday() != self.leaderboard_weekday:
            return
        try:
            post = await get_leaderboard_post(
                self.store, self.slack, channel, puzzle_day, self.bot_name, self.lookback
            )
            await self.slack.post_message(channel, post)
        except (StoreError, SlackApiError) as e:
            logger.error(f"Could not post weekly leaderboard for Wordle {puzzle_day}: {e}")
