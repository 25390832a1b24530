"""
SQLite-backed job log.

Each call to ``log_entry`` appends one row to ``job_logs``. The connection
is shared between threads and writes are serialised with a lock, so one
sink can serve every job a worker runs.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from docpush.errors import truncate_error
from docpush.reporting.interface import JobLogSink

if TYPE_CHECKING:
    from docpush.models.job import Job

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS job_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    job_id TEXT,
    message TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_job_logs_job_id ON job_logs(job_id);
"""


class SqliteJobLogSink(JobLogSink):
    """Persists job-log lines to a SQLite database.

    Args:
        path: Database file, or ":memory:"
        busy_timeout_ms: How long to wait on a locked database
    """

    def __init__(self, path: str | Path, busy_timeout_ms: int = 30000) -> None:
        self.path = str(path)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)}")
        self._conn.executescript(SCHEMA)
        self._conn.commit()

    def log_entry(self, job: Job | None, message: str) -> None:
        job_id = job.job_id if job is not None else None
        try:
            with self._lock:
                self._conn.execute(
                    "INSERT INTO job_logs (job_id, message, created_at) VALUES (?, ?, ?)",
                    (
                        job_id,
                        truncate_error(message),
                        datetime.now(timezone.utc).isoformat(),
                    ),
                )
                self._conn.commit()
        except sqlite3.Error as e:
            logger.error("Failed to persist job log for %s: %s", job_id, e)

    def entries(self, job_id: str) -> list[str]:
        """Return the messages logged for a job, oldest first."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT message FROM job_logs WHERE job_id = ? ORDER BY id",
                (job_id,),
            ).fetchall()
        return [row[0] for row in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()
