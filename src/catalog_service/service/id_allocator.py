"""Sequential identifier allocation for new product records."""
from __future__ import annotations

from typing import Iterable, List

from ..data.records import ProductRecord


def numeric_id(value: object) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def _max_id(records: Iterable[ProductRecord]) -> int:
    return max([0] + [numeric_id(record.id) for record in records])


def next_id(records: Iterable[ProductRecord]) -> str:
    """Return ``max(existing numeric ids) + 1`` as a string.

    Ids that do not parse as integers count as ``0``, so they never raise the
    allocated value. An empty catalog starts at ``"1"``.
    """

    return str(_max_id(records) + 1)


def allocate_ids(records: Iterable[ProductRecord], count: int) -> List[str]:
    """Allocate ``count`` consecutive ids after the current maximum, in order."""

    if count < 0:
        raise ValueError("count must not be negative")
    start = _max_id(records) + 1
    return [str(start + offset) for offset in range(count)]
