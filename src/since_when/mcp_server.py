"""MCP server for since-when.

Exposes tracked events as MCP tools so an assistant can ask "when did I last ...?".
Run via: python3 -m since_when.mcp_server
"""
from __future__ import annotations

from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP

from since_when.errors import DataFormatError, InvalidDateError, StorageError, UnknownEventError

mcp = FastMCP(name="since-when")


def _get_db():
    from since_when.config import get_db_path
    from since_when.db import Database
    return Database(get_db_path())


def _load_rows(db) -> list[dict]:
    from since_when.db import load_summary
    return load_summary(db, date.today())


@mcp.tool()
def get_events() -> dict[str, Any]:
    """List tracked events, most recent first, with days since and average gap."""
    try:
        db = _get_db()
    except StorageError as exc:
        return {"error": str(exc)}
    try:
        rows = _load_rows(db)
    finally:
        db.close()
    if not rows:
        return {"events": [], "count": 0, "message": "No events yet. Run since-when add <name>."}
    return {"events": rows, "count": len(rows)}


@mcp.tool()
def get_event(name: str) -> dict[str, Any]:
    """Get days since, average gap and occurrence count for one event."""
    try:
        db = _get_db()
    except StorageError as exc:
        return {"error": str(exc)}
    try:
        rows = _load_rows(db)
    finally:
        db.close()
    for row in rows:
        if row["name"] == name.strip():
            return row
    return {"error": f"No such event: {name}"}


@mcp.tool()
def get_month(year: int, month: int) -> dict[str, Any]:
    """List which events occurred on which day of a month."""
    from since_when.calendar_view import MonthView
    from since_when.since import get_date

    try:
        get_date(year, month, 1)
    except InvalidDateError as exc:
        return {"error": str(exc)}
    try:
        db = _get_db()
    except StorageError as exc:
        return {"error": str(exc)}
    try:
        by_day = db.events_by_year_month(year, month)
    except StorageError as exc:
        return {"error": str(exc)}
    finally:
        db.close()
    view = MonthView(year=year, month=month)
    return {
        "title": view.title,
        "days": {str(day): names for day, names in sorted(by_day.items())},
    }


@mcp.tool()
def record_occurrence(name: str, when: str | None = None) -> dict[str, Any]:
    """Record that an existing event happened on a date (YYYY-MM-DD, default today)."""
    from since_when.since import parse_date

    try:
        occurred = parse_date(when) if when else date.today()
    except DataFormatError as exc:
        return {"error": str(exc)}
    try:
        db = _get_db()
    except StorageError as exc:
        return {"error": str(exc)}
    try:
        db.insert_occurrence(name, occurred)
    except (UnknownEventError, StorageError) as exc:
        return {"error": str(exc)}
    finally:
        db.close()
    return {"ok": True, "name": name.strip(), "date": occurred.isoformat()}


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
