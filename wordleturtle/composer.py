from __future__ import annotations

from typing import Sequence

from .affirmations import FlavorText
from .days import date_for_puzzle
from .results import Result
from .standings import is_in_last, is_in_lead, leader_string, names_string, position_summary


def help_text(bot_name: str) -> str:
    return "\n".join([
        "Supported commands are:",
        f"• `{bot_name} help`: show this message",
        f"• `{bot_name} leaderboard`: standings for the last week of Wordles",
        "Share your Wordle result (e.g. `Wordle 1,283 3/6*`) and I'll keep score.",
    ])


def final_message(dailies: Sequence[Result]) -> str:
    return f":confetti_ball: Congratulations to {leader_string(dailies)}! :confetti_ball:\nFinal {position_summary(dailies)}"


def mood_line(current: Result, dailies: Sequence[Result], flavor: FlavorText) -> str | None:
    special = flavor.special_day(date_for_puzzle(current.puzzle_day), current.score)
    if special:
        return special
    if len(dailies) == 1:
        # First person to play
        return flavor.early_bird(current.score)
    if is_in_lead(current, dailies):
        return flavor.affirmation(current.score)
    if is_in_last(current, dailies):
        return flavor.consolation()
    return None


def result_post(current: Result, dailies: Sequence[Result], missing: Sequence[str], flavor: FlavorText) -> str:
    """Reply to a freshly recorded result."""
    if not missing:
        return final_message(dailies)

    summary = f"Current {position_summary(dailies)}"
    mood = mood_line(current, dailies, flavor)
    if mood:
        summary = f"{mood}\n\n{summary}"
    return summary


def warning_message(puzzle_day: int, dailies: Sequence[Result], missing: Sequence[str]) -> str:
    msg = f":hourglass: One hour left to play Wordle #{puzzle_day}!"
    if missing:
        msg += f"\nStill waiting on: {names_string(missing)}"
    if dailies:
        msg += f"\n\nCurrent {position_summary(dailies)}"
    return msg


def deadline_message(puzzle_day: int, dailies: Sequence[Result], missing: Sequence[str]) -> str:
    if not dailies:
        return f"Nobody played Wordle #{puzzle_day} today :cry:"
    msg = final_message(dailies).rstrip("\n")
    if missing:
        msg += f"\n:turkey: {names_string(missing)} forgot to play!"
    return msg
