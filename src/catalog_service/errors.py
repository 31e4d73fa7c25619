"""Error taxonomy translated to ``{error, message}`` JSON bodies at the HTTP boundary."""
from __future__ import annotations

from typing import Dict


class CatalogError(Exception):
    def __init__(self, message: str, error: str = "Request failed", status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.error = error
        self.status_code = status_code

    def to_body(self) -> Dict[str, str]:
        return {"error": self.error, "message": self.message}


class ProductNotFoundError(CatalogError):
    def __init__(self, product_id: str, message: str | None = None):
        super().__init__(
            message or f"Product with ID {product_id} does not exist",
            error="Product not found",
            status_code=404,
        )
        self.product_id = product_id


class BadRequestError(CatalogError):
    def __init__(self, error: str, message: str | None = None):
        super().__init__(message or error, error=error, status_code=400)


class InternalError(CatalogError):
    def __init__(self, error: str, message: str):
        super().__init__(message, error=error, status_code=500)
