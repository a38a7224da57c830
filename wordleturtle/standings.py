from __future__ import annotations

from typing import Iterable, List, Sequence

from slack_sdk.errors import SlackApiError

from .config import logger
from .results import FAIL_SCORE, Result
from .slack import SlackConnection


def leaders(results: Sequence[Result]) -> List[Result]:
    """All results sharing the best score. A fail only leads when nobody solved."""
    if not results:
        return []
    best = min(r.score for r in results)
    return [r for r in results if r.score == best]


def is_in_lead(result: Result, results: Sequence[Result]) -> bool:
    if not results:
        return False
    return result.score == min(r.score for r in results)


def is_in_last(result: Result, results: Sequence[Result]) -> bool:
    if not results:
        return False
    return result.score == max(r.score for r in results)


def names_string(names: Sequence[str]) -> str:
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def leader_string(results: Sequence[Result]) -> str:
    return names_string([r.display_name for r in leaders(results)])


def _score_label(score: int) -> str:
    return "x" if score >= FAIL_SCORE else str(score)


def position_summary(results: Iterable[Result]) -> str:
    """
    Render the day's standings, one line per distinct score:

        Results for Wordle #123:
        3/6: user2, user3
        x/6: user4
    """
    ordered = sorted(results, key=lambda r: (r.score, r.display_name))
    if not ordered:
        return "No plays yet."

    lines = [f"Results for Wordle #{ordered[0].puzzle_day}:"]
    current_score = ordered[0].score
    current_names: List[str] = []
    for r in ordered:
        if r.score != current_score:
            lines.append(f"{_score_label(current_score)}/6: {', '.join(current_names)}")
            current_score = r.score
            current_names = []
        current_names.append(r.display_name)
    lines.append(f"{_score_label(current_score)}/6: {', '.join(current_names)}")
    return "\n".join(lines) + "\n"


async def missing_players(
    slack: SlackConnection,
    members: Sequence[str],
    results: Sequence[Result],
    bot_name: str,
) -> List[str]:
    """Display names of channel members without a result. Unresolvable members are dropped."""
    played = {r.user_id for r in results}
    missing = [u for u in members if u not in played]
    logger.debug(f"Missing user ids: {', '.join(missing)}")

    translated: List[str] = []
    for user_id in missing:
        try:
            name = await slack.name_for_user(user_id)
        except SlackApiError as e:
            logger.warning(f"Could not resolve name for {user_id}: {e}")
            continue
        if name == bot_name:
            continue
        translated.append(name)
    logger.debug(f"Missing players: {', '.join(translated)}")
    return translated
