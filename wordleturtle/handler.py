from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from slack_sdk.errors import SlackApiError

from .affirmations import FlavorText
from .composer import help_text, result_post
from .config import logger
from .leaderboard import DEFAULT_LOOKBACK_DAYS, get_leaderboard_post
from .results import Result, parse_command, parse_result
from .scheduler import DeadlineScheduler
from .slack import SlackConnection
from .standings import missing_players
from .storage import ResultStore, StoreError


class WordleTurtle:
    """Handles one inbound channel message at a time and posts the reply."""

    def __init__(
        self,
        store: ResultStore,
        slack: SlackConnection,
        scheduler: DeadlineScheduler,
        bot_name: str,
        flavor: Optional[FlavorText] = None,
        lookback: int = DEFAULT_LOOKBACK_DAYS,
    ):
        self.store = store
        self.slack = slack
        self.scheduler = scheduler
        self.bot_name = bot_name
        self.flavor = flavor or FlavorText()
        self.lookback = lookback

    async def handle_message(self, channel: str, user_id: str, text: str) -> Optional[str]:
        """
        Process a message and return the text posted back, or None when nothing was posted.

        Failing to resolve the sender aborts before anything is stored. A failed store
        write or membership lookup propagates as well.
        """
        user = await self.slack.name_for_user(user_id)
        logger.debug(f"Message from {user} ({user_id}) in {channel}")
        if user == self.bot_name:
            # Our own message, ignore
            return None

        verb = parse_command(text, self.bot_name)
        if verb:
            return await self.handle_command(channel, verb)

        res = parse_result(text)
        if res is None:
            return None
        res.user_id = user_id
        res.display_name = user
        res.timestamp = datetime.now(timezone.utc)

        await asyncio.to_thread(self.store.append, res)
        logger.info(f"Recorded Wordle {res.puzzle_day} for {user}: {res.score} (hard mode: {res.hard_mode})")

        dailies = await self._dailies(res.puzzle_day)
        members = await self.slack.get_users(channel)
        missing = await missing_players(self.slack, members, dailies, self.bot_name)

        self.scheduler.schedule(channel, res.puzzle_day)

        post = result_post(res, dailies, missing, self.flavor)
        await self.slack.post_message(channel, post)
        return post

    async def _dailies(self, puzzle_day: int) -> List[Result]:
        try:
            dailies = await asyncio.to_thread(self.store.query_by_day, puzzle_day)
        except StoreError as e:
            logger.error(f"Could not load results for Wordle {puzzle_day}: {e}")
            return []
        logger.debug(f"We have {len(dailies)} results for Wordle {puzzle_day}")
        return dailies

    async def handle_command(self, channel: str, verb: str) -> Optional[str]:
        if verb == "help":
            post = help_text(self.bot_name)
        elif verb == "leaderboard":
            post = await self._leaderboard(channel)
            if post is None:
                return None
        else:
            logger.warning(f"Unknown command: {verb}")
            return None
        await self.slack.post_message(channel, post)
        return post

    async def _leaderboard(self, channel: str) -> Optional[str]:
        try:
            latest = await asyncio.to_thread(self.store.query_max_known_day)
            if latest is None:
                return "No Wordle results recorded yet. Share one to get started!"
            return await get_leaderboard_post(
                self.store, self.slack, channel, latest, self.bot_name, self.lookback
            )
        except (StoreError, SlackApiError) as e:
            logger.error(f"Could not build leaderboard for {channel}: {e}")
            return None
