"""Certificate verification warnings for outbound HTTPS calls."""

from __future__ import annotations

import logging
from typing import Iterable

import urllib3
from urllib3.exceptions import InsecureRequestWarning

logger = logging.getLogger(__name__)


def relax_certificate_warnings(endpoints: Iterable[tuple[str, bool]]) -> list[str]:
    """Silence urllib3's per-request warning when some endpoint skips verification.

    ``endpoints`` pairs a label with its ``verify_certificates`` flag. Each
    unverified endpoint is logged once so the relaxation stays visible.
    """

    unverified = [label for label, verify in endpoints if not verify]
    for label in unverified:
        logger.warning("TLS certificate verification is disabled for %s", label)
    if unverified:
        urllib3.disable_warnings(InsecureRequestWarning)
    return unverified


__all__ = ["relax_certificate_warnings"]
