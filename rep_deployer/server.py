"""Helpers for starting the HTTP server."""

from __future__ import annotations

import logging
import socket

logger = logging.getLogger(__name__)


def is_port_available(host: str, port: int) -> bool:
    """Return ``True`` when ``port`` can be bound on ``host``."""

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(host: str, port: int, retry_limit: int) -> int | None:
    """Return the first free port in ``port .. port + retry_limit``."""

    for attempt in range(retry_limit + 1):
        candidate = port + attempt
        if is_port_available(host, candidate):
            return candidate
        if attempt < retry_limit:
            logger.warning(
                "Port %s is already in use. Retrying with port %s (attempt %d/%d).",
                candidate,
                candidate + 1,
                attempt + 1,
                retry_limit,
            )
    return None


__all__ = ["find_available_port", "is_port_available"]
