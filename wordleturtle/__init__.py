"""WordleTurtle: Wordle score keeping for Slack channels.

- config: environment and logging
- results: Result record, share and command parsers
- storage: results store interface and SQLite backend
- slack: Slack Web API connection
- days: puzzle number <-> calendar day, deadline math
- standings: per-day leaders, positions and missing players
- leaderboard: rolling weekly aggregation
- affirmations / composer: message text
- scheduler: once-per-day deadline sequence
- handler: per-message orchestration
- app: Slack Bolt wiring and hosting
"""

from .results import Result, WordleParser, parse_result, parse_command
from .storage import ResultStore, SQLiteResultStore, StoreError
from .scheduler import DeadlineScheduler, ScheduledDays
from .handler import WordleTurtle


def main() -> None:
    from .app import main as _main
    _main()


__all__ = [
    "Result", "WordleParser", "parse_result", "parse_command",
    "ResultStore", "SQLiteResultStore", "StoreError",
    "DeadlineScheduler", "ScheduledDays",
    "WordleTurtle",
    "main",
]
