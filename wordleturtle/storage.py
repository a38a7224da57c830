from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from .config import logger
from .results import Result

# -------------------------
# Storage
# -------------------------

SCHEMA = """
CREATE TABLE IF NOT EXISTS results(
  id           INTEGER PRIMARY KEY AUTOINCREMENT,
  puzzle_day   INTEGER NOT NULL,
  user_id      TEXT NOT NULL,
  display_name TEXT NOT NULL,
  score        INTEGER NOT NULL,  -- 1..6; fail stored as 7
  hard_mode    INTEGER NOT NULL DEFAULT 0,
  submitted_at TEXT NOT NULL      -- ISO8601 UTC
);
CREATE INDEX IF NOT EXISTS idx_results_day
  ON results(puzzle_day);
"""


class StoreError(RuntimeError):
    """A read or write against the results store failed."""


class ResultStore(Protocol):
    def append(self, result: Result) -> None: ...
    def query_by_day(self, puzzle_day: int) -> List[Result]: ...
    def query_max_known_day(self) -> Optional[int]: ...


class SQLiteResultStore:
    """Append-only results table. Duplicate (user, day) rows are kept."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        try:
            with self._get_conn() as c:
                c.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StoreError(f"Could not initialise results store at {db_path}: {e}") from e

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def append(self, result: Result) -> None:
        submitted_at = result.timestamp or datetime.now(timezone.utc)
        try:
            with self._get_conn() as c:
                c.execute(
                    """
                    INSERT INTO results(puzzle_day, user_id, display_name, score, hard_mode, submitted_at)
                    VALUES(?,?,?,?,?,?)
                    """,
                    (
                        result.puzzle_day, result.user_id, result.display_name,
                        result.score, result.hard_mode, submitted_at.isoformat(),
                    ),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Could not record result for Wordle {result.puzzle_day}: {e}") from e
        logger.debug(f"Recorded Wordle {result.puzzle_day} for {result.user_id}: {result.score}")

    def query_by_day(self, puzzle_day: int) -> List[Result]:
        try:
            with self._get_conn() as c:
                rows = c.execute(
                    """
                    SELECT * FROM results
                    WHERE puzzle_day=?
                    ORDER BY id ASC
                    """,
                    (puzzle_day,),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Could not load results for Wordle {puzzle_day}: {e}") from e
        return [_row_to_result(r) for r in rows]

    def query_max_known_day(self) -> Optional[int]:
        try:
            with self._get_conn() as c:
                row = c.execute("SELECT MAX(puzzle_day) AS max_day FROM results").fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Could not find the latest Wordle: {e}") from e
        return row["max_day"]


def _row_to_result(row: sqlite3.Row) -> Result:
    return Result(
        puzzle_day=row["puzzle_day"],
        score=row["score"],
        hard_mode=row["hard_mode"],
        user_id=row["user_id"],
        display_name=row["display_name"],
        timestamp=datetime.fromisoformat(row["submitted_at"]),
    )
