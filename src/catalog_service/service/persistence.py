"""JSON file persistence for the product catalog."""
from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from fastapi.concurrency import run_in_threadpool

from ..data.records import ProductRecord, default_products
from .product_store import ProductStore

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Reads and writes the catalog as a pretty-printed top-level JSON array.

    Failures are logged and never raised: a broken or unreadable file loads as
    an empty catalog, and a failed write leaves the previous file in place.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> List[ProductRecord]:
        if not self.path.exists():
            logger.info("Catalog file %s not found, creating an empty one", self.path)
            self.save([])
            return []
        try:
            with self.path.open(encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.error("Failed to load catalog from %s: %s", self.path, exc)
            return []
        if not isinstance(raw, list):
            logger.error("Catalog file %s does not hold a JSON array", self.path)
            return []
        records = [ProductRecord.from_dict(row) for row in raw if isinstance(row, dict)]
        logger.info("Loaded %d products from %s", len(records), self.path)
        return records

    def save(self, rows: List[Dict[str, Any]]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump(rows, handle, indent=2, ensure_ascii=False)
                handle.write("\n")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save catalog to %s: %s", self.path, exc)
            return False
        logger.debug("Saved %d products to %s", len(rows), self.path)
        return True


class StoreSaver:
    """Write-behind policy for the catalog file.

    Every save writes the whole current snapshot, so when several mutations
    land before a save runs only the latest state reaches disk. A save is
    skipped if the store revision it would write has already been persisted.
    """

    def __init__(self, store: ProductStore, storage: JsonFileStorage) -> None:
        self.store = store
        self.storage = storage
        self.saved_revision: int | None = None
        self.writes = 0
        self._lock = asyncio.Lock()

    @property
    def dirty(self) -> bool:
        return self.saved_revision != self.store.revision

    def _write(self, revision: int, rows: List[Dict[str, Any]]) -> bool:
        if not self.storage.save(rows):
            return False
        self.saved_revision = revision
        self.writes += 1
        return True

    def save_if_dirty(self) -> bool:
        if not self.dirty:
            return False
        return self._write(self.store.revision, self.store.snapshot())

    async def save_in_background(self) -> bool:
        # Saves run one at a time so an older snapshot never lands after a newer one.
        async with self._lock:
            if not self.dirty:
                return False
            revision, rows = self.store.revision, self.store.snapshot()
            return await run_in_threadpool(self._write, revision, rows)

    def mark_clean(self) -> None:
        self.saved_revision = self.store.revision

    def flush(self) -> bool:
        return self._write(self.store.revision, self.store.snapshot())


def load_store(storage: JsonFileStorage, seed_defaults: bool = True) -> ProductStore:
    """Build the catalog from disk, seeding the default products when it is empty."""

    store = ProductStore(storage.load())
    if not len(store) and seed_defaults:
        logger.info("Catalog is empty, seeding default products")
        store.replace_all(default_products())
    return store
