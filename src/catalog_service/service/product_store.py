"""In-memory product catalog that handlers read and mutate."""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping

from ..data.records import ProductRecord, coerce_price
from ..errors import ProductNotFoundError
from .id_allocator import allocate_ids, next_id

EDITABLE_FIELDS = ("name", "description", "price", "category", "picture_url", "status")


def _clean_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key in EDITABLE_FIELDS:
        value = fields.get(key)
        if value is None:
            continue
        cleaned[key] = coerce_price(value) if key == "price" else str(value)
    return cleaned


class ProductStore:
    """Ordered list of product records owned by the running application.

    ``revision`` grows by one on every mutation so that the persistence layer
    can tell whether the current state has already been written.
    """

    def __init__(self, records: Iterable[ProductRecord] = ()) -> None:
        self._records: List[ProductRecord] = list(records)
        self.revision = 0

    def __len__(self) -> int:
        return len(self._records)

    def list_products(self) -> List[ProductRecord]:
        return list(self._records)

    def snapshot(self) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in self._records]

    def get(self, product_id: str) -> ProductRecord:
        for record in self._records:
            if record.id == product_id:
                return record
        raise ProductNotFoundError(product_id)

    def replace_all(self, records: Iterable[ProductRecord]) -> None:
        self._records = list(records)
        self.revision += 1

    def create(self, fields: Mapping[str, Any]) -> ProductRecord:
        """Append a record built from ``fields``; any ``id`` in them is ignored."""

        record = ProductRecord(id=next_id(self._records), **_clean_fields(fields))
        self._records.append(record)
        self.revision += 1
        return record

    def create_many(self, items: List[Mapping[str, Any]]) -> List[ProductRecord]:
        ids = allocate_ids(self._records, len(items))
        created = [
            ProductRecord(id=product_id, **_clean_fields(fields))
            for product_id, fields in zip(ids, items)
        ]
        self._records.extend(created)
        if created:
            self.revision += 1
        return created

    def update(self, product_id: str, changes: Mapping[str, Any]) -> ProductRecord:
        """Merge ``changes`` into the stored record; the id never changes."""

        for index, record in enumerate(self._records):
            if record.id == product_id:
                updated = replace(record, **_clean_fields(changes))
                self._records[index] = updated
                self.revision += 1
                return updated
        raise ProductNotFoundError(
            product_id, f"Cannot update - product with ID {product_id} does not exist"
        )

    def delete(self, product_id: str) -> ProductRecord:
        for index, record in enumerate(self._records):
            if record.id == product_id:
                self.revision += 1
                return self._records.pop(index)
        raise ProductNotFoundError(
            product_id, f"Cannot delete - product with ID {product_id} does not exist"
        )
