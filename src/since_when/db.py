"""SQLite event store for since-when."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from pathlib import Path

from since_when.errors import (
    DataFormatError,
    DuplicateEventError,
    StorageError,
    UnknownEventError,
)
from since_when.since import Occurrence, parse_date, summarize

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".since-when" / "since_when.db"


class Database:
    """SQLite database manager with WAL mode."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(self.db_path))
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA foreign_keys=ON")
            self.init_db()
        except (sqlite3.Error, OSError) as exc:
            logger.error("Error opening database %s: %s", self.db_path, exc)
            raise StorageError(f"Cannot open database {self.db_path}: {exc}") from exc

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS events (
                id INTEGER PRIMARY KEY,
                name TEXT NOT NULL UNIQUE
            );

            CREATE TABLE IF NOT EXISTS occurrences (
                event_id INTEGER NOT NULL REFERENCES events(id),
                date TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_occurrences_event
                ON occurrences (event_id);
        """)
        self.conn.commit()

    def get_event_id(self, name: str) -> int | None:
        """Return the id of an event, or None if it is not tracked."""
        try:
            row = self.conn.execute(
                "SELECT id FROM events WHERE name = ?", (name,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise _storage_error("looking up event", name, exc) from exc
        return row["id"] if row else None

    def _require_event_id(self, name: str) -> int:
        event_id = self.get_event_id(name.strip())
        if event_id is None:
            raise UnknownEventError(name)
        return event_id

    def list_events(self) -> list[str]:
        """Return all event names, alphabetically."""
        rows = self.conn.execute("SELECT name FROM events ORDER BY name").fetchall()
        return [row["name"] for row in rows]

    def insert_event(self, name: str) -> int:
        """Insert a new event and return its id."""
        name = _clean_name(name)
        try:
            cursor = self.conn.execute("INSERT INTO events (name) VALUES (?)", (name,))
            self.conn.commit()
        except sqlite3.IntegrityError as exc:
            raise DuplicateEventError(name) from exc
        except sqlite3.Error as exc:
            raise _storage_error("adding event", name, exc) from exc
        logger.info("Event added: %s", name)
        return cursor.lastrowid

    def insert_occurrence(self, name: str, when: date) -> None:
        """Record one occurrence of an existing event."""
        event_id = self._require_event_id(name)
        try:
            with self.conn:
                self.conn.execute(
                    "INSERT INTO occurrences (event_id, date) VALUES (?, ?)",
                    (event_id, when.isoformat()),
                )
        except sqlite3.Error as exc:
            raise _storage_error("recording occurrence of", name, exc) from exc
        logger.info("Occurrence added: %s on %s", name, when.isoformat())

    def add_event(self, name: str, when: date) -> int:
        """Insert a new event together with its first occurrence."""
        name = _clean_name(name)
        try:
            with self.conn:
                cursor = self.conn.execute("INSERT INTO events (name) VALUES (?)", (name,))
                self.conn.execute(
                    "INSERT INTO occurrences (event_id, date) VALUES (?, ?)",
                    (cursor.lastrowid, when.isoformat()),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateEventError(name) from exc
        except sqlite3.Error as exc:
            raise _storage_error("adding event", name, exc) from exc
        logger.info("Event added: %s, first occurrence %s", name, when.isoformat())
        return cursor.lastrowid

    def delete_event(self, name: str) -> int:
        """Delete an event and all of its occurrences. Returns occurrences removed."""
        event_id = self._require_event_id(name)
        try:
            with self.conn:
                deleted = self.conn.execute(
                    "DELETE FROM occurrences WHERE event_id = ?", (event_id,)
                ).rowcount
                self.conn.execute("DELETE FROM events WHERE id = ?", (event_id,))
        except sqlite3.Error as exc:
            raise _storage_error("deleting event", name, exc) from exc
        logger.info("Event deleted: %s (%d occurrences)", name, deleted)
        return deleted

    def list_occurrences(self) -> list[Occurrence]:
        """Return every occurrence of every event, newest first.

        Rows whose date cannot be parsed are logged and skipped.
        """
        try:
            rows = self.conn.execute(
                "SELECT e.name, o.date FROM events e "
                "JOIN occurrences o ON e.id = o.event_id "
                "ORDER BY o.date DESC"
            ).fetchall()
        except sqlite3.Error as exc:
            logger.error("Error retrieving occurrences: %s", exc)
            raise StorageError(str(exc)) from exc

        occurrences: list[Occurrence] = []
        for row in rows:
            try:
                occurrences.append(Occurrence(event_name=row["name"], date=parse_date(row["date"])))
            except DataFormatError as exc:
                logger.warning("Skipping occurrence of %r: %s", row["name"], exc)
        return occurrences

    def events_by_year_month(self, year: int, month: int) -> dict[int, list[str]]:
        """Map day-of-month to the names of events that occurred that day."""
        prefix = f"{year:04d}-{month:02d}-"
        try:
            rows = self.conn.execute(
                "SELECT e.name, o.date FROM events e "
                "JOIN occurrences o ON e.id = o.event_id "
                "WHERE o.date LIKE ? ORDER BY o.date, e.name",
                (prefix + "%",),
            ).fetchall()
        except sqlite3.Error as exc:
            logger.error("Error retrieving %s occurrences: %s", prefix.rstrip("-"), exc)
            raise StorageError(str(exc)) from exc

        by_day: dict[int, list[str]] = {}
        for row in rows:
            try:
                day = parse_date(row["date"]).day
            except DataFormatError as exc:
                logger.warning("Skipping occurrence of %r: %s", row["name"], exc)
                continue
            by_day[day] = by_day.get(day, []) + [row["name"]]
        return by_day

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Event name must not be empty")
    return cleaned


def _storage_error(action: str, name: str, exc: sqlite3.Error) -> StorageError:
    logger.error("Error %s %r: %s", action, name, exc)
    return StorageError(f"Error {action} {name!r}: {exc}")


def load_summary(db: Database, today: date | None = None) -> list[dict]:
    """Read all occurrences and summarize them; storage failures give an empty list."""
    try:
        occurrences = db.list_occurrences()
    except StorageError as exc:
        logger.error("Could not read events: %s", exc)
        occurrences = []
    return summarize(occurrences, today or date.today())
