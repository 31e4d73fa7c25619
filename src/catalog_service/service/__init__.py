"""Catalog state, identifier allocation and persistence."""

from .id_allocator import allocate_ids, next_id
from .persistence import JsonFileStorage, StoreSaver, load_store
from .product_store import ProductStore

__all__ = [
    "JsonFileStorage",
    "ProductStore",
    "StoreSaver",
    "allocate_ids",
    "load_store",
    "next_id",
]
