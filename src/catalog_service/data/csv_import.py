"""Parse uploaded CSV text into staged product records awaiting review."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from ..service.id_allocator import allocate_ids
from .records import PLACEHOLDER_PICTURE_URL, ProductRecord, coerce_price

logger = logging.getLogger(__name__)

MIN_COLUMNS = 5
PENDING_STATUS = "pending"
DEFAULT_NAME = "Unnamed product"
DEFAULT_DESCRIPTION = "No description"
DEFAULT_CATEGORY = "Uncategorized"


@dataclass
class CsvImportResult:
    products: List[ProductRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.products)


def decode_upload(data: bytes) -> str:
    return data.decode("utf-8-sig")


def _strip_quotes(column: str) -> str:
    column = column.strip()
    if column.startswith('"'):
        column = column[1:]
    if column.endswith('"'):
        column = column[:-1]
    return column


def split_row(line: str) -> List[str]:
    """Split on every comma; quoted commas are not supported."""

    return [_strip_quotes(column) for column in line.split(",")]


def parse_products_csv(text: str, existing: Sequence[ProductRecord]) -> CsvImportResult:
    """Turn CSV text into pending records without touching the catalog.

    The first non-blank line is a header and is always skipped. Rows with fewer
    than five columns are dropped. Ids are one consecutive batch after the
    highest id in ``existing``, assigned in output order.
    """

    lines = [line for line in text.split("\n") if line.strip()]
    rows = [split_row(line) for line in lines[1:]]
    accepted = [columns for columns in rows if len(columns) >= MIN_COLUMNS]
    if len(accepted) < len(rows):
        logger.debug("Dropped %d CSV rows with fewer than %d columns", len(rows) - len(accepted), MIN_COLUMNS)

    ids = allocate_ids(existing, len(accepted))
    result = CsvImportResult()
    for product_id, columns in zip(ids, accepted):
        name, description, price, category, picture_url = columns[:MIN_COLUMNS]
        result.products.append(
            ProductRecord(
                id=product_id,
                name=name or DEFAULT_NAME,
                description=description or DEFAULT_DESCRIPTION,
                price=coerce_price(price),
                category=category or DEFAULT_CATEGORY,
                picture_url=picture_url or PLACEHOLDER_PICTURE_URL,
                status=PENDING_STATUS,
            )
        )
    return result
