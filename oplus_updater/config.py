# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Updater configuration helpers.

This module defines the UpdaterConfig dataclass which centralizes HTTP settings
and the zone registry used by the updater client, and a loader reading them
from a TOML file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .zones import ZONES, ZoneConfig, build_registry

CONFIG_ENV_VAR = "OPLUS_UPDATER_CONFIG"


@dataclass(frozen=True)
class UpdaterConfig:
    """
    Configuration for the update-check client.

    Args:
        user_agent: User-Agent header used for HTTP requests.
        request_timeout: Timeout in seconds for HTTP requests.
        endpoint_path: Path of the update-check endpoint on the zone host.
        device_id: Optional fixed device identifier (hashed before use).
        zones: Zone registry used to resolve zone codes.
    """

    user_agent: str = "okhttp/4.9.3"
    request_timeout: int = 60  # seconds
    endpoint_path: str = "/update/v3"
    device_id: Optional[str] = None
    zones: Mapping[str, ZoneConfig] = field(default_factory=lambda: ZONES, repr=False)


DEFAULT_CONFIG = UpdaterConfig()


def default_config_path() -> Path:
    """Return the config path from OPLUS_UPDATER_CONFIG, or ./oplus-updater.toml."""
    return Path(os.environ.get(CONFIG_ENV_VAR, "oplus-updater.toml"))


def load_config(config_path: Path | None = None) -> UpdaterConfig:
    """Load configuration from a TOML file.

    The file may contain a ``[client]`` table (user_agent, request_timeout,
    endpoint_path, device_id) and ``[zones.XX]`` tables overriding fields of
    the built-in zones.

    Args:
        config_path: Path to the TOML file. If None, uses default_config_path().

    Returns:
        UpdaterConfig with loaded settings, or defaults if the file is missing.

    Raises:
        tomllib.TOMLDecodeError: If the file exists but is not valid TOML.
        UnknownZone: If a zone table names an unsupported zone.
    """
    if config_path is None:
        config_path = default_config_path()

    logger = logging.getLogger(__name__)

    try:
        with open(config_path, "rb") as f:
            config = tomllib.load(f)
    except (FileNotFoundError, OSError) as ex:
        logger.warning("Config file not found or error reading: %s. Using defaults.", ex)
        return DEFAULT_CONFIG

    client = config.get("client", {})
    zones = build_registry(config.get("zones", {}))

    cfg = UpdaterConfig(
        user_agent=client.get("user_agent", DEFAULT_CONFIG.user_agent),
        request_timeout=int(client.get("request_timeout", DEFAULT_CONFIG.request_timeout)),
        endpoint_path=client.get("endpoint_path", DEFAULT_CONFIG.endpoint_path),
        device_id=client.get("device_id") or None,
        zones=zones,
    )
    logger.info(
        "Config loaded from %s: timeout=%s, endpoint=%s, zones=%s",
        config_path,
        cfg.request_timeout,
        cfg.endpoint_path,
        ",".join(zones),
    )
    return cfg
