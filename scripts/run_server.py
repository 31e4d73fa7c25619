"""Start the product catalog API."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from app.main import create_app
from catalog_service.config import ServiceConfig
from catalog_service.server import PortUnavailableError, serve


def parse_args(defaults: ServiceConfig) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument(
        "--fallback-port",
        type=int,
        default=defaults.fallback_port,
        help="Port tried when the primary port cannot be bound.",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=defaults.data_file,
        help="JSON file holding the catalog.",
    )
    parser.add_argument("--cors-origin", default=defaults.cors_origin)
    parser.add_argument("--log-level", default=defaults.log_level)
    return parser.parse_args()


def main() -> None:
    defaults = ServiceConfig.from_env()
    args = parse_args(defaults)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    config = ServiceConfig(
        data_file=args.data_file,
        host=args.host,
        port=args.port,
        fallback_port=args.fallback_port,
        cors_origin=args.cors_origin,
        seed_defaults=defaults.seed_defaults,
        log_level=args.log_level.lower(),
    )
    try:
        serve(create_app(config), config)
    except PortUnavailableError as exc:
        logging.getLogger("catalog_service").error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
