"""SQLite schema migrations."""
from __future__ import annotations

import os
import sqlite3
from typing import Iterable

SCHEMA: Iterable[str] = [
    """
CREATE TABLE IF NOT EXISTS interview_configs (
  interviewId TEXT PRIMARY KEY,
  configJson TEXT NOT NULL,
  metaJson TEXT,
  createdAt TEXT NOT NULL,
  updatedAt TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS summaries (
  interviewId TEXT PRIMARY KEY,
  summary TEXT NOT NULL,
  rawConversation TEXT,
  createdAt TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS groups (
  groupId TEXT PRIMARY KEY,
  restaurantName TEXT,
  interviewIds TEXT NOT NULL,
  createdAt TEXT NOT NULL,
  updatedAt TEXT NOT NULL
);
""",
    """
CREATE TABLE IF NOT EXISTS group_summaries (
  groupId TEXT PRIMARY KEY,
  summary TEXT NOT NULL,
  createdAt TEXT NOT NULL
);
""",
]


def migrate(db_path: str = "data/summaries.db") -> None:
    """Apply schema migrations to the SQLite database."""

    directory = os.path.dirname(db_path) or "."
    os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


if __name__ == "__main__":
    from config.settings import settings

    migrate(settings.DB_PATH)
