"""
Streaming radius filter over line-delimited JSON records.

Each line is handled fully (decode -> convert -> measure -> keep/drop) before the
next one is read. The first bad line aborts the run; no partial result is returned.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from pydantic import ValidationError

from proximity.core.geo import EARTH_RADIUS_KM, Coordinate, distance, parse_degree_string
from proximity.domain.models import Customer, RawRecord
from proximity.errors import DecodeError, DuplicateIdError, ParseError, StreamError

logger = logging.getLogger(__name__)


def decode_record(raw: str | bytes, *, line_no: int = 1) -> RawRecord:
    """Structural decode of one JSON line. Raises `StreamError` on malformed input."""
    try:
        return RawRecord.model_validate_json(raw)
    except ValidationError as e:
        raise StreamError(f"malformed record: {_first_error(e)}", line_no=line_no) from e


def to_customer(record: RawRecord) -> Customer:
    """Convert the textual degree coordinates to radians. Raises `ParseError`."""
    return Customer(
        user_id=record.user_id,
        name=record.name,
        location=Coordinate(
            lat=parse_degree_string(record.latitude),
            lon=parse_degree_string(record.longitude),
        ),
    )


def filter_within_radius(
    records: Iterable[str | bytes],
    reference: Coordinate | Customer,
    threshold_km: float,
    *,
    radius_km: float = EARTH_RADIUS_KM,
    clamp: bool = True,
    reject_duplicate_ids: bool = False,
    first_line_no: int = 1,
) -> list[Customer]:
    """Return customers strictly closer than `threshold_km` to `reference`, in input order.

    `records` is any iterable of lines (an open text/binary file works). Blank lines are
    skipped. `first_line_no` only affects the line numbers reported in errors.
    """
    origin = _coordinate_of(reference)
    matches: list[Customer] = []
    seen: dict[int, int] = {}
    scanned = 0

    for line_no, raw in iter_lines(records, first_line_no):
        if not raw.strip():
            continue
        scanned += 1
        record = decode_record(raw, line_no=line_no)
        try:
            customer = to_customer(record)
        except ParseError as e:
            raise DecodeError(line_no, e) from e

        if customer.user_id in seen:
            if reject_duplicate_ids:
                raise DuplicateIdError(customer.user_id, line_no=line_no, first_line_no=seen[customer.user_id])
            logger.debug("Duplicate user_id %s on line %s", customer.user_id, line_no)
        else:
            seen[customer.user_id] = line_no

        d = distance(origin, customer.location, radius_km=radius_km, clamp=clamp)
        if d < threshold_km:
            matches.append(customer)
            logger.debug("Keep user_id=%s distance=%.3f km", customer.user_id, d)

    logger.info("Scanned %s records; %s within %.1f km", scanned, len(matches), threshold_km)
    return matches


def iter_lines(records: Iterable[str | bytes], first_line_no: int = 1) -> Iterator[tuple[int, str | bytes]]:
    """Yield (line_no, raw) pairs; read failures become `StreamError`."""
    it = iter(records)
    line_no = first_line_no
    while True:
        try:
            raw = next(it)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as e:
            raise StreamError(f"read failed: {e}", line_no=line_no) from e
        yield line_no, raw
        line_no += 1


def _coordinate_of(reference: Coordinate | Customer) -> Coordinate:
    if isinstance(reference, Coordinate):
        return reference
    return reference.location


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
    return f"{loc}: {err.get('msg', 'invalid')}"
