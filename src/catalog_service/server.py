"""Runtime helper for launching the catalog API with a fallback port."""
from __future__ import annotations

import logging
import socket
from typing import Tuple

import uvicorn
from fastapi import FastAPI

from .config import ServiceConfig

logger = logging.getLogger(__name__)


class PortUnavailableError(RuntimeError):
    pass


def bind_socket(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def open_listener(config: ServiceConfig) -> Tuple[socket.socket, int]:
    """Bind the primary port, falling back to the secondary one."""

    try:
        return bind_socket(config.host, config.port), config.port
    except OSError as exc:
        logger.error("Failed to bind %s:%d: %s", config.host, config.port, exc)

    try:
        return bind_socket(config.host, config.fallback_port), config.fallback_port
    except OSError as exc:
        logger.error("Failed to bind fallback port %s:%d: %s", config.host, config.fallback_port, exc)
        raise PortUnavailableError(
            f"Neither port {config.port} nor {config.fallback_port} could be bound"
        ) from exc


def serve(app: FastAPI, config: ServiceConfig) -> None:  # pragma: no cover - exercised in deployment
    sock, port = open_listener(config)
    logger.info("Product catalog listening on http://localhost:%d", port)
    logger.info("Health:   http://localhost:%d/health", port)
    logger.info("Products: http://localhost:%d/products", port)
    logger.info("Data file: %s", config.data_file.resolve())

    server = uvicorn.Server(
        uvicorn.Config(app, log_level=config.log_level)
    )
    server.run(sockets=[sock])


__all__ = ["PortUnavailableError", "bind_socket", "open_listener", "serve"]
