# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors

"""OPlus component OTA update-check client library.

This package implements the update-check protocol used by OPlus, OPPO and
realme devices: a fresh AES-256 key encrypts the device attributes in CTR mode,
the key travels RSA-OAEP wrapped under the zone public key, and the answer is
an AES-CTR encrypted update manifest.

Main Components:
    - UpdaterClient: Core client building, sending and decrypting queries
    - Zones: CN/EU/IN registry of hosts and public keys
    - Crypto: Key generation, key wrapping and AES-CTR helpers
    - Messages: Request header and body builders
    - Responses: Typed envelope parsing and manifest decoding
    - Scan: Sequential carrier-id scan

Example:
    Basic update query::

        from oplus_updater import QueryAttributes, query_update

        manifest = query_update(QueryAttributes(ota_version="RMX3820_11.A", zone="EU"))
        print(manifest.real_version_name)
"""

__version__ = "0.1.0"

from .attributes import QueryAttributes, normalize_ota_version
from .client import UpdaterClient, query_update
from .config import DEFAULT_CONFIG, UpdaterConfig, load_config
from .crypto import KeyMaterial, generate_key_material, random_iv, random_key, wrap_key
from .errors import (
    HeaderBuildError,
    InvalidProxyError,
    KeyWrapError,
    MalformedEnvelopeError,
    MalformedManifestError,
    MissingRequiredInput,
    RandomSourceError,
    ServerRejected,
    TransportError,
    UnknownZone,
    UpdaterError,
)
from .manifest import UpdateManifest
from .scan import ScanResult, carrier_ids, scan_carrier_ids
from .zones import ZONES, ZoneConfig, resolve_zone
