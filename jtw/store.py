"""SQLite persistence for config, aliases, templates and history."""
import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from pydantic import ValidationError

from .config import DB_PATH, AppConfig
from .errors import ConfigMissing
from .models import Alias, HistoryEntry, Template, WorklogEntry

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS config (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    jira_url TEXT NOT NULL,
    jira_username TEXT NOT NULL,
    jira_password TEXT NOT NULL,
    project_key TEXT NOT NULL,
    ai_provider TEXT NOT NULL CHECK (ai_provider IN ('anthropic', 'openai')),
    ai_api_key TEXT NOT NULL,
    ai_model TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS aliases (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    keyword TEXT UNIQUE NOT NULL,
    task TEXT NOT NULL,
    description TEXT,
    usage_count INTEGER DEFAULT 0,
    last_used_at TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS templates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    entries TEXT NOT NULL,
    usage_count INTEGER DEFAULT 0,
    last_used_at TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task TEXT NOT NULL,
    activity TEXT NOT NULL,
    hours REAL NOT NULL,
    date TEXT NOT NULL,
    logged_at TEXT DEFAULT CURRENT_TIMESTAMP,
    source TEXT
);
CREATE INDEX IF NOT EXISTS idx_history_date ON history(date);
CREATE INDEX IF NOT EXISTS idx_history_task ON history(task);
"""


class Store:
    def __init__(self, path: Path = DB_PATH) -> None:
        self.path = Path(path)

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            connection = sqlite3.connect(self.path)
        except (OSError, sqlite3.Error) as exc:
            raise ConfigMissing(f"Cannot open data store at {self.path}: {exc}") from exc
        connection.row_factory = sqlite3.Row
        try:
            try:
                connection.executescript(SCHEMA)
                self.path.chmod(0o600)
            except (OSError, sqlite3.Error) as exc:
                raise ConfigMissing(f"Cannot open data store at {self.path}: {exc}") from exc
            with connection:
                yield connection
        finally:
            connection.close()

    # --- config -----------------------------------------------------------
    def get_config(self) -> AppConfig | None:
        with self.connect() as connection:
            row = connection.execute("SELECT * FROM config WHERE id = 1").fetchone()
        if row is None:
            return None
        return AppConfig(
            jira_url=row["jira_url"],
            jira_username=row["jira_username"],
            jira_password=row["jira_password"],
            project_key=row["project_key"],
            ai_provider=row["ai_provider"],
            ai_api_key=row["ai_api_key"],
            ai_model=row["ai_model"],
        )

    def save_config(self, config: AppConfig) -> None:
        with self.connect() as connection:
            connection.execute(
                """
                INSERT OR REPLACE INTO config (
                    id, jira_url, jira_username, jira_password, project_key,
                    ai_provider, ai_api_key, ai_model, updated_at
                ) VALUES (1, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
                """,
                (
                    config.jira_url,
                    config.jira_username,
                    config.jira_password,
                    config.project_key,
                    config.ai_provider.value,
                    config.ai_api_key,
                    config.ai_model or None,
                ),
            )
        logger.debug("Saved config to %s", self.path)

    # --- aliases ----------------------------------------------------------
    def get_aliases(self) -> list[Alias]:
        with self.connect() as connection:
            rows = connection.execute(
                "SELECT * FROM aliases ORDER BY usage_count DESC, id"
            ).fetchall()
        return [_alias(row) for row in rows]

    def find_alias(self, keyword: str) -> Alias | None:
        with self.connect() as connection:
            row = connection.execute(
                "SELECT * FROM aliases WHERE keyword = ?", (keyword,)
            ).fetchone()
        return _alias(row) if row else None

    def save_alias(self, keyword: str, task: str, description: str | None = None) -> None:
        with self.connect() as connection:
            connection.execute(
                """
                INSERT INTO aliases (keyword, task, description)
                VALUES (?, ?, ?)
                ON CONFLICT(keyword) DO UPDATE SET
                    task = excluded.task,
                    description = excluded.description
                """,
                (keyword, task, description or None),
            )

    def delete_alias(self, keyword: str) -> bool:
        with self.connect() as connection:
            cursor = connection.execute("DELETE FROM aliases WHERE keyword = ?", (keyword,))
        return cursor.rowcount > 0

    def increment_alias_usage(self, keyword: str) -> None:
        with self.connect() as connection:
            connection.execute(
                """
                UPDATE aliases
                SET usage_count = usage_count + 1, last_used_at = CURRENT_TIMESTAMP
                WHERE keyword = ?
                """,
                (keyword,),
            )

    # --- templates --------------------------------------------------------
    def get_templates(self) -> list[Template]:
        with self.connect() as connection:
            rows = connection.execute(
                "SELECT * FROM templates ORDER BY usage_count DESC, id"
            ).fetchall()
        return [_template(row) for row in rows]

    def get_template(self, name: str) -> Template | None:
        with self.connect() as connection:
            row = connection.execute(
                "SELECT * FROM templates WHERE name = ?", (name,)
            ).fetchone()
        return _template(row) if row else None

    def save_template(self, name: str, entries: Sequence[WorklogEntry]) -> None:
        # Dates are entered again each time a template is logged.
        payload = [
            {"task": e.task, "activity": e.activity, "hours": e.hours, "date": ""}
            for e in entries
        ]
        with self.connect() as connection:
            connection.execute(
                """
                INSERT INTO templates (name, entries)
                VALUES (?, ?)
                ON CONFLICT(name) DO UPDATE SET entries = excluded.entries
                """,
                (name, json.dumps(payload, ensure_ascii=False)),
            )

    def delete_template(self, name: str) -> bool:
        with self.connect() as connection:
            cursor = connection.execute("DELETE FROM templates WHERE name = ?", (name,))
        return cursor.rowcount > 0

    def increment_template_usage(self, name: str) -> None:
        with self.connect() as connection:
            connection.execute(
                """
                UPDATE templates
                SET usage_count = usage_count + 1, last_used_at = CURRENT_TIMESTAMP
                WHERE name = ?
                """,
                (name,),
            )

    # --- history ----------------------------------------------------------
    def save_history(self, entries: Sequence[HistoryEntry]) -> None:
        with self.connect() as connection:
            connection.executemany(
                """
                INSERT INTO history (task, activity, hours, date, source)
                VALUES (?, ?, ?, ?, ?)
                """,
                [(e.task, e.activity, e.hours, e.date, e.source) for e in entries],
            )
        logger.debug("Saved %d history entries", len(entries))

    def get_history(self, limit: int = 50) -> list[HistoryEntry]:
        with self.connect() as connection:
            rows = connection.execute(
                "SELECT * FROM history ORDER BY id DESC LIMIT ?", (limit,)
            ).fetchall()
        return [
            HistoryEntry(
                task=row["task"],
                activity=row["activity"],
                hours=row["hours"],
                date=row["date"],
                source=row["source"] or "ai",
                logged_at=row["logged_at"],
            )
            for row in rows
        ]

    def get_recent_tasks(self, limit: int = 10) -> list[str]:
        with self.connect() as connection:
            rows = connection.execute(
                """
                SELECT task, MAX(id) AS last_id
                FROM history
                GROUP BY task
                ORDER BY last_id DESC
                LIMIT ?
                """,
                (limit,),
            ).fetchall()
        return [row["task"] for row in rows]


def _alias(row: sqlite3.Row) -> Alias:
    return Alias(
        keyword=row["keyword"],
        task=row["task"],
        description=row["description"],
        usage_count=row["usage_count"] or 0,
        last_used_at=row["last_used_at"],
        created_at=row["created_at"],
    )


def _template(row: sqlite3.Row) -> Template:
    try:
        entries = [WorklogEntry.model_validate(item) for item in json.loads(row["entries"])]
    except (ValueError, TypeError, ValidationError):
        logger.warning("Corrupted template data for %r, using empty entries", row["name"])
        entries = []
    return Template(
        name=row["name"],
        entries=entries,
        usage_count=row["usage_count"] or 0,
        last_used_at=row["last_used_at"],
        created_at=row["created_at"],
    )
