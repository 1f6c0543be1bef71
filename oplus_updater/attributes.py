# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Query attributes and their normalization.

Functions:
- normalize_ota_version: complete a short OTA version to the canonical shape.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import MissingRequiredInput
from .zones import DEFAULT_ZONE

OTA_VERSION_SUFFIX = ".00_0000_000000000000"
PLACEHOLDER = "nil"

MODE_STABLE = 0
MODE_TESTING = 1


def normalize_ota_version(ota_version: str) -> str:
    """
    Normalize an OTA version string.

    A version needs at least three "_"-separated and three "."-separated
    segments (e.g. "RMX3820_11.A.00_0000_000000000000"); shorter ones such as
    "RMX3820_11.A" get the canonical ".00_0000_000000000000" suffix.

    Args:
        ota_version: OTA version as given by the user.

    Returns:
        The normalized version.
    """
    if len(ota_version.split("_")) < 3 or len(ota_version.split(".")) < 3:
        return ota_version + OTA_VERSION_SUFFIX
    return ota_version


@dataclass(frozen=True)
class QueryAttributes:
    """
    Device attributes for one update-check query.

    Attributes:
        ota_version: OTA version, e.g. "RMX3820_11.A.00_0000_000000000000".
        android_version: Android version, e.g. "Android14" ("nil" if unknown).
        color_os_version: ColorOS version, e.g. "ColorOS14.1.0" ("nil" if unknown).
        zone: Server zone code (CN, EU, IN); empty means CN.
        mode: 0 for stable, 1 for testing.
        proxy: Optional proxy specification.
        carrier_id: Optional 8-bit carrier id override as a binary string.
    """

    ota_version: str
    android_version: str = ""
    color_os_version: str = ""
    zone: str = ""
    mode: int = MODE_STABLE
    proxy: str = ""
    carrier_id: str = ""

    @property
    def model(self) -> str:
        """Device model, the OTA version text before the first underscore."""
        return self.ota_version.split("_")[0]

    def normalized(self) -> "QueryAttributes":
        """
        Return a normalized copy of these attributes.

        Raises:
            MissingRequiredInput: If ota_version is empty.
        """
        ota = self.ota_version.strip()
        if not ota:
            raise MissingRequiredInput("ota_version")
        return replace(
            self,
            ota_version=normalize_ota_version(ota),
            android_version=self.android_version.strip() or PLACEHOLDER,
            color_os_version=self.color_os_version.strip() or PLACEHOLDER,
            zone=(self.zone.strip() or DEFAULT_ZONE).upper(),
            proxy=self.proxy.strip(),
            carrier_id=self.carrier_id.strip(),
        )

    def with_carrier_id(self, carrier_id: str) -> "QueryAttributes":
        """Return a copy with the carrier id override set."""
        return replace(self, carrier_id=carrier_id)
