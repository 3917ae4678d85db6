from __future__ import annotations

from typing import Any, Iterable

from proximity.domain.models import Customer


def sort_by_id(customers: Iterable[Customer]) -> list[Customer]:
    return sorted(customers, key=lambda c: c.user_id)


def format_matches(customers: Iterable[Customer]) -> list[str]:
    """One `"<user_id> <name>"` line per customer, ascending by user_id."""
    return [f"{c.user_id} {c.name}" for c in sort_by_id(customers)]


def to_json_rows(customers: Iterable[Customer]) -> list[dict[str, Any]]:
    """JSON-friendly rows (coordinates back in degrees), ascending by user_id."""
    rows: list[dict[str, Any]] = []
    for c in sort_by_id(customers):
        lat, lon = c.location.to_degrees()
        rows.append({"user_id": c.user_id, "name": c.name, "latitude": round(lat, 7), "longitude": round(lon, 7)})
    return rows
