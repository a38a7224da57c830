from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .config import logger
from .results import FAIL_SCORE
from .slack import SlackConnection
from .standings import names_string
from .storage import ResultStore

DEFAULT_LOOKBACK_DAYS = 7
NO_SHOW_SLOT = FAIL_SCORE  # score_matrix[0..6] count scores 1..7, the last slot counts no-shows

HEADER = ("Player", "Score", "1s", "2s", "3s", "4s", "5s", "6s", "Xs", "Turkey")


@dataclass
class LeaderboardScore:
    user_id: str
    total_score: int = 0
    score_matrix: List[int] = field(default_factory=lambda: [0] * (NO_SHOW_SLOT + 1))


def tally_scores(
    store: ResultStore,
    members: Sequence[str],
    puzzle_day: int,
    lookback: int = DEFAULT_LOOKBACK_DAYS,
) -> List[LeaderboardScore]:
    """
    Combine the ``lookback`` days ending at ``puzzle_day`` into per-member totals.

    Every member starts with ``lookback`` no-shows; each result earns ``8 - score``
    points and converts one no-show into a count for its score. Results from users
    outside ``members`` are ignored. Store failures propagate.
    """
    scores: Dict[str, LeaderboardScore] = {}
    for user_id in members:
        if user_id in scores:
            continue
        s = LeaderboardScore(user_id=user_id)
        # Start with all turkeys
        s.score_matrix[NO_SHOW_SLOT] = lookback
        scores[user_id] = s

    for offset in range(lookback):
        for result in store.query_by_day(puzzle_day - offset):
            s = scores.get(result.user_id)
            if s is None:
                continue
            s.total_score += 8 - result.score
            s.score_matrix[result.score - 1] += 1
            s.score_matrix[NO_SHOW_SLOT] -= 1

    # sorted() is stable, ties keep membership order
    return sorted(scores.values(), key=lambda s: s.total_score, reverse=True)


def render_table(rows: Sequence[Tuple]) -> str:
    table = [tuple(str(c) for c in HEADER)] + [tuple(str(c) for c in row) for row in rows]
    widths = [max(len(r[i]) for r in table) for i in range(len(HEADER))]

    def fmt(row: Tuple[str, ...]) -> str:
        cells = [row[0].ljust(widths[0])] + [c.rjust(w) for c, w in zip(row[1:], widths[1:])]
        return " | ".join(cells).rstrip()

    lines = [fmt(table[0]), "-+-".join("-" * w for w in widths)]
    lines.extend(fmt(r) for r in table[1:])
    return "\n".join(lines)


async def get_leaderboard_post(
    store: ResultStore,
    slack: SlackConnection,
    channel: str,
    puzzle_day: int,
    bot_name: str,
    lookback: int = DEFAULT_LOOKBACK_DAYS,
) -> str:
    """Weekly leaderboard for ``channel``. Any store or Slack failure aborts the post."""
    members = await slack.get_users(channel)
    scores = await asyncio.to_thread(tally_scores, store, members, puzzle_day, lookback)

    rows: List[Tuple] = []
    missing: List[str] = []
    for score in scores:
        player = await slack.name_for_user(score.user_id)
        if player == bot_name:
            continue
        if score.total_score == 0:
            missing.append(player)
            continue
        rows.append((player, score.total_score, *score.score_matrix))

    logger.info(f"Leaderboard for Wordle {puzzle_day - lookback + 1}-{puzzle_day}: {len(rows)} ranked, {len(missing)} missing")

    msg = "```\n" + render_table(rows) + "\n```"
    if missing:
        msg += f"\n:turkey: {names_string(missing)} forgot to show up!"
    return msg
