"""
Sharded variant of the radius filter.

Records have no cross-line dependency, so contiguous slices of the input can be
filtered independently and concatenated in slice order. The output is identical
to `filter_within_radius` over the whole input, and so is the first error raised.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Sequence

from proximity.core.geo import EARTH_RADIUS_KM, Coordinate
from proximity.domain.models import Customer
from proximity.errors import DuplicateIdError, StreamError
from proximity.records.filter import decode_record, filter_within_radius, iter_lines

logger = logging.getLogger(__name__)


def split_shards(records: Sequence, shards: int) -> list[tuple[int, Sequence]]:
    """Split into at most `shards` contiguous slices as (first_line_no, slice) pairs."""
    if int(shards) < 1:
        raise ValueError("shards must be >= 1")
    n = len(records)
    if n == 0:
        return []
    size = -(-n // int(shards))
    return [(start + 1, records[start : start + size]) for start in range(0, n, size)]


def filter_sharded(
    records: Iterable[str | bytes],
    reference: Coordinate | Customer,
    threshold_km: float,
    *,
    shards: int = 1,
    radius_km: float = EARTH_RADIUS_KM,
    clamp: bool = True,
    reject_duplicate_ids: bool = False,
) -> list[Customer]:
    """Filter `records` across `shards` worker threads.

    Errors are reported in line order, the same one a sequential run would raise:
    a read failure only wins when every line before it is valid, and a duplicate
    id spanning two shards wins over any later shard error.
    """
    kwargs = {"radius_km": radius_km, "clamp": clamp}
    if int(shards) <= 1:
        return filter_within_radius(
            records, reference, threshold_km, reject_duplicate_ids=reject_duplicate_ids, **kwargs
        )

    if isinstance(records, Sequence):
        lines = records
    else:
        lines = []
        try:
            for _, raw in iter_lines(records):
                lines.append(raw)
        except StreamError:
            # Anything wrong in the lines read so far comes first.
            filter_within_radius(lines, reference, threshold_km, reject_duplicate_ids=reject_duplicate_ids, **kwargs)
            raise

    parts = split_shards(lines, shards)
    logger.info("Filtering %s lines in %s shards", len(lines), len(parts))

    with ThreadPoolExecutor(max_workers=len(parts) or 1, thread_name_prefix="shard") as pool:
        futures = [
            pool.submit(
                filter_within_radius,
                part,
                reference,
                threshold_km,
                reject_duplicate_ids=reject_duplicate_ids,
                first_line_no=first,
                **kwargs,
            )
            for first, part in parts
        ]

    # Shards are in line order and each stops at its own first error.
    first_error = next((e for e in (f.exception() for f in futures) if e is not None), None)
    stop = getattr(first_error, "line_no", None)
    if reject_duplicate_ids and (first_error is None or stop is not None):
        _check_duplicates(parts, before=stop)
    if first_error is not None:
        raise first_error

    return [c for f in futures for c in f.result()]


def _check_duplicates(parts: list[tuple[int, Sequence]], *, before: int | None = None) -> None:
    """Raise on the first id repeated across shards, looking only at lines before `before`."""
    seen: dict[int, int] = {}
    for first, part in parts:
        for offset, raw in enumerate(part):
            line_no = first + offset
            if before is not None and line_no >= before:
                return
            if not raw.strip():
                continue
            user_id = decode_record(raw, line_no=line_no).user_id
            if user_id in seen:
                raise DuplicateIdError(user_id, line_no=line_no, first_line_no=seen[user_id])
            seen[user_id] = line_no
