"""CLI commands for since-when."""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from since_when.calendar_view import MonthView
from since_when.config import (
    DB_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    get_db_path,
    get_log_level,
    load_config,
    set_db_path,
)
from since_when.db import Database, load_summary
from since_when.display import (
    print_calendar,
    print_config,
    print_error,
    print_event_result,
    print_events,
)
from since_when.errors import (
    DataFormatError,
    DuplicateEventError,
    InvalidDateError,
    StorageError,
    UnknownEventError,
)
from since_when.log import setup_logging
from since_when.since import parse_date

logger = logging.getLogger(__name__)


def _date_arg(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return parse_date(value)
    except DataFormatError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="since-when",
        description="Track how long it has been since things last happened",
    )
    parser.add_argument("--db", default=None, help=f"Database path (or set {DB_ENV_VAR})")
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. INFO or DEBUG")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("events", help="Show days since each event (default)")
    add_parser = subparsers.add_parser("add", help="Start tracking a new event")
    add_parser.add_argument("name", help="Event name")
    add_parser.add_argument("--date", type=_date_arg, default=None, help="First occurrence (default: today)")
    update_parser = subparsers.add_parser("update", help="Record another occurrence of an event")
    update_parser.add_argument("name", help="Event name")
    update_parser.add_argument("--date", type=_date_arg, default=None, help="Occurrence date (default: today)")
    delete_parser = subparsers.add_parser("delete", help="Stop tracking an event and drop its history")
    delete_parser.add_argument("name", help="Event name")
    cal_parser = subparsers.add_parser("calendar", help="Show a month with occurrences marked")
    cal_parser.add_argument("--year", "-y", type=int, default=None)
    cal_parser.add_argument("--month", "-m", type=int, choices=range(1, 13), default=None)
    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_sub = config_parser.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Show effective settings")
    set_db_p = config_sub.add_parser("set-db", help="Persist the database path")
    set_db_p.add_argument("path", help="Path to the SQLite database file")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "events"

    setup_logging(get_log_level(args.log_level))

    if command == "config":
        if args.config_command == "set-db":
            do_config_set_db(args.path)
        else:
            do_config_show(db_override=args.db)
        return

    try:
        db = Database(get_db_path(args.db))
    except StorageError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    try:
        if command == "events":
            result = do_events(db)
        elif command == "add":
            result = do_add(db, args.name, when=args.date)
        elif command == "update":
            result = do_update(db, args.name, when=args.date)
        elif command == "delete":
            result = do_delete(db, args.name)
        else:
            result = do_calendar(db, year=args.year, month=args.month)
    finally:
        db.close()

    if not result.get("ok"):
        raise SystemExit(1)


def do_events(db: Database, today: date | None = None) -> dict:
    """Show every tracked event with days since and average gap."""
    rows = load_summary(db, today)
    print_events(rows)
    return {"ok": True, "events": rows, "count": len(rows)}


def do_add(db: Database, name: str, when: date | None = None) -> dict:
    """Track a new event with its first occurrence."""
    when = when or date.today()
    try:
        db.add_event(name, when)
    except DuplicateEventError as exc:
        print_error(f"{exc}. Use: since-when update {name!r}")
        return {"ok": False, "reason": "duplicate"}
    except ValueError as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "invalid_name"}
    except StorageError as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "storage"}
    result = {"ok": True, "action": "add", "name": name.strip(), "date": when.isoformat()}
    print_event_result(result)
    return result


def do_update(db: Database, name: str, when: date | None = None) -> dict:
    """Record another occurrence of an existing event."""
    when = when or date.today()
    try:
        db.insert_occurrence(name, when)
    except UnknownEventError as exc:
        print_error(f"{exc}. Use: since-when add {name!r}")
        return {"ok": False, "reason": "unknown_event"}
    except StorageError as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "storage"}
    result = {"ok": True, "action": "update", "name": name.strip(), "date": when.isoformat()}
    print_event_result(result)
    return result


def do_delete(db: Database, name: str) -> dict:
    """Delete an event and all of its occurrences."""
    try:
        removed = db.delete_event(name)
    except UnknownEventError as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "unknown_event"}
    except StorageError as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "storage"}
    result = {"ok": True, "action": "delete", "name": name.strip(), "occurrences_removed": removed}
    print_event_result(result)
    return result


def do_calendar(
    db: Database, year: int | None = None, month: int | None = None, today: date | None = None
) -> dict:
    """Show a month grid with the days that have occurrences."""
    today = today or date.today()
    view = MonthView(
        year=today.year if year is None else year,
        month=today.month if month is None else month,
    )
    try:
        view.grid()
    except InvalidDateError as exc:
        print_error(str(exc))
        return {"ok": False, "reason": "invalid_date"}
    try:
        events_by_day = db.events_by_year_month(view.year, view.month)
    except StorageError as exc:
        logger.error("Could not read %s: %s", view.title, exc)
        events_by_day = {}
    print_calendar(view, events_by_day, today=today)
    return {"ok": True, "year": view.year, "month": view.month, "events_by_day": events_by_day}


def do_config_show(db_override: str | None = None, config_path: Path | None = None) -> dict:
    """Show the effective settings and where they come from."""
    data = {
        "config_file": str(config_path or DEFAULT_CONFIG_PATH),
        "db_path": str(get_db_path(db_override, config_path)),
        "log_level": get_log_level(None, config_path),
    }
    extra = {k: v for k, v in load_config(config_path).items() if k not in data}
    data.update(extra)
    print_config(data)
    return {"ok": True, **data}


def do_config_set_db(path: str, config_path: Path | None = None) -> dict:
    """Persist the database path to the config file."""
    expanded = Path(path).expanduser().resolve()
    set_db_path(expanded, config_path)
    result = {"ok": True, "db_path": str(expanded)}
    print_config(result)
    return result


if __name__ == "__main__":
    main()
