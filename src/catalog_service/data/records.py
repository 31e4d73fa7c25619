"""Product record model shared by the store, the persistence layer and CSV import."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional


PLACEHOLDER_PICTURE_URL = "https://picsum.photos/300/300?product"
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def coerce_price(value: Any) -> float:
    """Best-effort price parsing; anything unusable becomes ``0.0``.

    Strings are read up to the end of their leading number, so ``"12.50 BRL"``
    is ``12.5`` and ``"1_000"`` is ``1.0``.
    """

    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if match is None:
            return 0.0
        price = float(match.group(0))
    else:
        try:
            price = float(value)
        except (TypeError, ValueError):
            return 0.0
    if not math.isfinite(price) or price < 0:
        return 0.0
    return price


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class ProductRecord:
    id: str
    name: str = ""
    description: str = ""
    price: float = 0.0
    category: str = ""
    picture_url: str = ""
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "pictureUrl": self.picture_url,
        }
        if self.status is not None:
            payload["status"] = self.status
        return payload

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ProductRecord":
        status = raw.get("status")
        return cls(
            id=_text(raw.get("id")),
            name=_text(raw.get("name")),
            description=_text(raw.get("description")),
            price=coerce_price(raw.get("price")),
            category=_text(raw.get("category")),
            picture_url=_text(raw.get("pictureUrl")),
            status=None if status is None else str(status),
        )


DEFAULT_PRODUCTS: List[ProductRecord] = [
    ProductRecord(
        id="1",
        name="Smartphone Samsung Galaxy S23",
        description="Android smartphone with 256GB storage, 8GB RAM and a 50MP triple camera",
        price=2999.99,
        category="Electronics",
        picture_url="https://picsum.photos/300/300?tech=1",
    ),
    ProductRecord(
        id="2",
        name="Notebook Dell Inspiron 15",
        description="Intel i7 notebook, 16GB RAM, 512GB SSD, Windows 11 Pro",
        price=4299.99,
        category="Computers",
        picture_url="https://picsum.photos/300/300?computer=2",
    ),
]


def default_products() -> List[ProductRecord]:
    return [replace(record) for record in DEFAULT_PRODUCTS]
