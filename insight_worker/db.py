"""
db.py — SQLite record store for journal entry analyses

This module provides:
  - Database path setup
  - Connection helper
  - Initialization of required tables
  - save / get / delete / query-by-user for per-entry analysis records
"""

import json
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

# Path to the SQLite database file (next to the package unless overridden)
_DB_PATH_ENV = os.getenv("INSIGHT_DB_PATH")
if _DB_PATH_ENV:
    DB_PATH = Path(_DB_PATH_ENV).expanduser()
else:
    DB_PATH = Path(__file__).parent / "insights.db"
DB_PATH = DB_PATH.resolve()


@contextmanager
def get_connection() -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection to our DB file; commits on success, rolls back on
    error and always closes.
    """
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(DB_PATH))
    try:
        with conn:
            yield conn
    finally:
        conn.close()


def initialize_db() -> None:
    """
    Create tables if they don't exist. Idempotent and safe to call on startup.
    """
    with get_connection() as conn:
        # analyses: one row per journal entry, owned by a user
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS analyses (
                user_id       TEXT NOT NULL,
                entry_id      TEXT NOT NULL,
                analysis_json TEXT NOT NULL,   -- normalized AnalysisResult
                perspective   TEXT,            -- alternative perspective text
                insights      TEXT,            -- reflective reply text
                updated_at    TEXT NOT NULL,   -- ISO8601 UTC
                PRIMARY KEY (user_id, entry_id)
            );
            """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_analyses_user
            ON analyses(user_id, updated_at DESC);
            """
        )


def _row_to_dict(row: Any) -> Dict[str, Any]:
    return {
        "user_id": row[0],
        "entry_id": row[1],
        "analysis": json.loads(row[2]),
        "perspective": row[3],
        "insights": row[4],
        "updated_at": row[5],
    }


def save_analysis(
    user_id: str,
    entry_id: str,
    analysis: Dict[str, Any],
    perspective: Optional[str] = None,
    insights: Optional[str] = None,
) -> Dict[str, Any]:
    """Insert or replace the analysis stored for an entry."""
    ts_iso = datetime.now(timezone.utc).isoformat(timespec="seconds")
    with get_connection() as conn:
        conn.execute(
            """
            INSERT INTO analyses (user_id, entry_id, analysis_json, perspective, insights, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, entry_id)
            DO UPDATE SET analysis_json=excluded.analysis_json,
                          perspective=excluded.perspective,
                          insights=excluded.insights,
                          updated_at=excluded.updated_at
            """,
            (user_id, entry_id, json.dumps(analysis, ensure_ascii=False), perspective, insights, ts_iso),
        )
    return {
        "user_id": user_id,
        "entry_id": entry_id,
        "analysis": analysis,
        "perspective": perspective,
        "insights": insights,
        "updated_at": ts_iso,
    }


def get_analysis(user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
    with get_connection() as conn:
        row = conn.execute(
            """
            SELECT user_id, entry_id, analysis_json, perspective, insights, updated_at
            FROM analyses
            WHERE user_id = ? AND entry_id = ?
            """,
            (user_id, entry_id),
        ).fetchone()
    return _row_to_dict(row) if row else None


def delete_analysis(user_id: str, entry_id: str) -> int:
    """Delete one entry's analysis; returns the number of rows removed."""
    with get_connection() as conn:
        cur = conn.execute(
            "DELETE FROM analyses WHERE user_id = ? AND entry_id = ?",
            (user_id, entry_id),
        )
        return cur.rowcount


def list_analyses_for_user(user_id: str, limit: Optional[int] = 500) -> List[Dict[str, Any]]:
    """Return a user's stored analyses, newest first; ``limit=None`` returns all."""
    with get_connection() as conn:
        rows = conn.execute(
            """
            SELECT user_id, entry_id, analysis_json, perspective, insights, updated_at
            FROM analyses
            WHERE user_id = ?
            ORDER BY updated_at DESC, entry_id ASC
            LIMIT ?
            """,
            (user_id, -1 if limit is None else limit),  # SQLite: negative LIMIT means no limit
        ).fetchall()
    return [_row_to_dict(r) for r in rows]
