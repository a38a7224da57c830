from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

FAIL_SCORE = 7  # "X/6" is stored as 7 so it ranks after 6


@dataclass
class Result:
    puzzle_day: int
    score: int                 # 1..6 attempts, 7 for a fail
    hard_mode: int = 0         # 1 when shared with the trailing "*"
    user_id: str = ""
    display_name: str = ""
    timestamp: Optional[datetime] = None


class WordleParser:
    # Example shares:
    # "Wordle 1,024 4/6\n\n🟨⬛..." (any grid)
    # "Wordle 250 X/6*" (hard mode has a trailing *)
    # The share has to start the message; reshares like "Look at this\nWordle 250 3/6" are ignored.
    WORDLE_LINE = re.compile(r"^\s*Wordle (?P<num>[\d,]+).* (?P<score>[1-6xX])/\d(?P<hard>\*)?")

    def try_parse(self, text: str) -> Optional[Result]:
        if not text:
            return None
        m = self.WORDLE_LINE.match(text)
        if not m:
            return None
        num = m.group("num").replace(",", "")
        if not num:
            return None
        raw = m.group("score")
        score = FAIL_SCORE if raw in ("x", "X") else int(raw)
        hard_mode = 1 if m.group("hard") else 0
        return Result(puzzle_day=int(num), score=score, hard_mode=hard_mode)


COMMANDS = ("help", "leaderboard")

_PARSER = WordleParser()


def parse_result(text: str) -> Optional[Result]:
    return _PARSER.try_parse(text)


def parse_command(text: str, bot_name: str) -> Optional[str]:
    """Return the verb of a "<bot_name> <verb>" message, or None for ordinary chatter."""
    if not text:
        return None
    pattern = rf"^{re.escape(bot_name)} ({'|'.join(COMMANDS)})\b"
    m = re.match(pattern, text)
    return m.group(1) if m else None
