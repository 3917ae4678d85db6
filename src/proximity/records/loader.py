"""
Input file loader.

The customer list is a local newline-delimited JSON file. The path is opened as given;
callers resolve configured defaults (see `proximity.core.env.resolve_project_path`).
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from proximity.errors import StreamError


@contextmanager
def open_records(path: str | Path, *, encoding: str = "utf-8") -> Iterator[TextIO]:
    """Open the input file for line-by-line reading."""
    p = Path(path).expanduser()
    try:
        fh = p.open("r", encoding=encoding)
    except OSError as e:
        raise StreamError(f"cannot open {p}: {e.strerror or e}") from e
    with fh:
        yield fh
