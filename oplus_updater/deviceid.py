# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Device identifier helpers for update-check requests.

The service only ever sees a one-way hash of the device identifier.

Functions:
- current_device_id: platform-derived identifier with a random fallback.
- random_device_id: 64-character pseudo-identifier.
- hash_device_id: uppercase hex SHA-256 of an identifier.
"""

from __future__ import annotations

import hashlib
import logging
import random
import shutil
import string
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

MACHINE_ID_PATHS = (Path("/etc/machine-id"), Path("/var/lib/dbus/machine-id"))


def random_device_id(length: int = 64) -> str:
    """
    Build a random pseudo device identifier.

    Args:
        length: Number of characters.

    Returns:
        Uppercase alphanumeric string.
    """
    rng = random.SystemRandom()
    return "".join(rng.choices(string.ascii_uppercase + string.digits, k=length))


def _read_machine_id() -> Optional[str]:
    for path in MACHINE_ID_PATHS:
        try:
            value = path.read_text(encoding="ascii").strip()
        except (OSError, UnicodeDecodeError):
            continue
        if value:
            return value
    return None


def _read_android_serial() -> Optional[str]:
    getprop = shutil.which("getprop")
    if getprop is None:
        return None
    try:
        out = subprocess.run(
            [getprop, "ro.serialno"], capture_output=True, text=True, timeout=5, check=False
        )
    except (OSError, subprocess.SubprocessError):
        return None
    value = out.stdout.strip()
    return value or None


@lru_cache(maxsize=1)
def _platform_device_id() -> str:
    value = _read_machine_id() or _read_android_serial()
    if value:
        logger.debug("Using platform device identifier")
        return value
    logger.debug("No platform device identifier available, using a random one")
    return random_device_id()


def current_device_id(override: Optional[str] = None) -> str:
    """
    Return the device identifier to use for requests.

    Policy: an explicit override wins; otherwise the machine id
    (/etc/machine-id, /var/lib/dbus/machine-id), then Android ro.serialno,
    then a random identifier kept for the lifetime of the process.

    Args:
        override: Optional fixed identifier (e.g. from configuration).

    Returns:
        Raw device identifier. Never send this value; hash it first.
    """
    if override:
        return override
    return _platform_device_id()


def hash_device_id(device_id: str) -> str:
    """
    Compute the transmitted form of a device identifier.

    Args:
        device_id: Raw identifier.

    Returns:
        Uppercase hex SHA-256 digest (64 characters).
    """
    return hashlib.sha256(device_id.encode()).hexdigest().upper()
