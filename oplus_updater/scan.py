# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Carrier-id scan.

Queries the service once per 8-bit carrier id, sequentially. A failing carrier
id is recorded and the scan moves on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from .attributes import QueryAttributes
from .client import UpdaterClient
from .errors import UpdaterError
from .manifest import UpdateManifest

logger = logging.getLogger(__name__)

CARRIER_ID_BITS = 8


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one carrier id: a manifest or the error that stopped it."""

    carrier_id: str
    manifest: Optional[UpdateManifest] = None
    error: Optional[UpdaterError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def carrier_ids() -> Iterator[str]:
    """Yield every carrier id "00000000".."11111111" in ascending order."""
    for i in range(2**CARRIER_ID_BITS):
        yield f"{i:0{CARRIER_ID_BITS}b}"


def scan_carrier_ids(
    client: UpdaterClient,
    attrs: QueryAttributes,
    progress_cb: Optional[Callable[[ScanResult], None]] = None,
) -> List[ScanResult]:
    """
    Query every carrier id in turn.

    Args:
        client: Client used for the queries.
        attrs: Base attributes; each query uses a copy with the carrier id set.
        progress_cb: Optional callback invoked with each result as it arrives.

    Returns:
        One ScanResult per carrier id, in ascending carrier id order.
    """
    results: List[ScanResult] = []
    for carrier_id in carrier_ids():
        try:
            result = ScanResult(carrier_id, manifest=client.query(attrs.with_carrier_id(carrier_id)))
        except UpdaterError as exc:
            logger.info("carrier id %s: %s", carrier_id, exc)
            result = ScanResult(carrier_id, error=exc)
        results.append(result)
        if progress_cb:
            progress_cb(result)
    return results
