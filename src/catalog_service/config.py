"""Configuration model for the product catalog service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _int(value: str | None, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ServiceConfig:
    """Listen address, CORS origin and the on-disk location of the catalog."""

    data_file: Path = Path("products-data.json")
    host: str = "0.0.0.0"
    port: int = 3000
    fallback_port: int = 3001
    cors_origin: str = "http://localhost:5173"
    seed_defaults: bool = True
    log_level: str = "info"

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        defaults = cls()
        configured_file = os.environ.get("PRODUCTS_FILE")
        return cls(
            data_file=Path(configured_file) if configured_file else defaults.data_file,
            host=os.environ.get("CATALOG_HOST", defaults.host),
            port=_int(os.environ.get("CATALOG_PORT"), defaults.port),
            fallback_port=_int(os.environ.get("CATALOG_FALLBACK_PORT"), defaults.fallback_port),
            cors_origin=os.environ.get("CORS_ORIGIN", defaults.cors_origin),
            seed_defaults=_bool(os.environ.get("SEED_DEFAULT_PRODUCTS"), defaults.seed_defaults),
            log_level=os.environ.get("LOG_LEVEL", defaults.log_level).lower(),
        )
