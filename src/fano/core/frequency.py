from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from fano.errors import IoError


class Occurrence(NamedTuple):
    symbol: int  # 0-255
    count: int


def count_occurrences(data: bytes) -> tuple[list[Occurrence], int]:
    """
    data -> (records, total)

    records are in first-seen order, one per distinct byte value.
    """
    counts: dict[int, int] = {}
    for b in data:
        counts[b] = counts.get(b, 0) + 1
    records = [Occurrence(sym, n) for sym, n in counts.items()]
    return records, len(data)


def read_input(path: str | Path) -> bytes:
    p = Path(path)
    try:
        return p.read_bytes()
    except OSError as e:
        raise IoError(f"File: {p} opening error ({e.strerror or e})") from e


def count_file_occurrences(path: str | Path) -> tuple[list[Occurrence], int]:
    return count_occurrences(read_input(path))


def sort_by_count_desc(records: list[Occurrence]) -> list[Occurrence]:
    """Most frequent first; equal counts keep ascending symbol order."""
    return sorted(records, key=lambda r: (-r.count, r.symbol))
