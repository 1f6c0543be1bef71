# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors

"""
Update-check request builders.

Provides helpers to construct the headers and the encrypted body posted to the
update endpoint. Nothing here touches the network.
"""

from __future__ import annotations

import base64
import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .attributes import QueryAttributes
from .crypto import KeyMaterial, aes_ctr_encrypt
from .errors import HeaderBuildError
from .zones import ZoneConfig

CONTENT_TYPE = "application/json; charset=utf-8"

_REQUIRED_HEADERS = (
    "language",
    "androidVersion",
    "colorOSVersion",
    "otaVersion",
    "model",
    "nvCarrier",
    "deviceId",
)


@dataclass(frozen=True)
class RequestEnvelope:
    """
    A fully built request, ready to be posted.

    Attributes:
        url: Endpoint URL on the zone host.
        headers: Request headers, including the protectedKey scene map.
        body: AES-CTR ciphertext of the serialized request record.
        iv: Initial counter block used for `body`.
    """

    url: str
    headers: Dict[str, str]
    body: bytes = field(repr=False)
    iv: bytes = field(repr=False)

    def wire_body(self) -> bytes:
        """Return the POST payload: {"params": "<json of {cipher, iv}>"}."""
        params = json.dumps(
            {
                "cipher": base64.b64encode(self.body).decode(),
                "iv": base64.b64encode(self.iv).decode(),
            },
            separators=(",", ":"),
        )
        return json.dumps({"params": params}, separators=(",", ":")).encode()


def build_headers(
    attrs: QueryAttributes,
    key_material: KeyMaterial,
    zone: ZoneConfig,
    hashed_device_id: str,
) -> Dict[str, str]:
    """
    Build the request headers.

    Args:
        attrs: Normalized query attributes.
        key_material: Key material for this request.
        zone: Zone configuration.
        hashed_device_id: Hashed device identifier.

    Returns:
        Headers dictionary.

    Raises:
        HeaderBuildError: If a required value is empty.
    """
    headers = {
        "language": zone.language,
        "androidVersion": attrs.android_version,
        "colorOSVersion": attrs.color_os_version,
        "romVersion": "unknown",
        "infVersion": "1",
        "otaVersion": attrs.ota_version,
        "model": attrs.model,
        "mode": str(attrs.mode),
        "nvCarrier": attrs.carrier_id or zone.carrier_id,
        "pipelineKey": "ALLNET",
        "operator": "ALLNET",
        "deviceId": hashed_device_id,
        "version": "2",
        "Content-Type": CONTENT_TYPE,
        "protectedKey": json.dumps(key_material.scene_descriptor(), separators=(",", ":")),
    }
    for name in _REQUIRED_HEADERS:
        if not headers[name]:
            raise HeaderBuildError(name)
    if not key_material.wrapped_key:
        raise HeaderBuildError("protectedKey")
    return headers


def build_request_record(
    attrs: QueryAttributes,
    hashed_device_id: str,
    carrier_id: str,
    now_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the plaintext request record.

    Args:
        attrs: Normalized query attributes.
        hashed_device_id: Hashed device identifier.
        carrier_id: Effective carrier id (override or zone default).
        now_ms: Request time in epoch milliseconds (defaults to now).

    Returns:
        Record dictionary, serialized and encrypted as the request body.
    """
    return {
        "mode": attrs.mode,
        "time": int(time.time() * 1000) if now_ms is None else now_ms,
        "isRooted": "0",
        "isLocked": True,
        "type": "1",
        "deviceId": hashed_device_id,
        "otaVersion": attrs.ota_version,
        "nvCarrier": carrier_id,
        "opex": {"check": True},
    }


def build_request_body(record: Dict[str, Any], key: bytes, iv: bytes) -> bytes:
    """
    Serialize and encrypt a request record.

    Returns:
        AES-CTR ciphertext, same length as the compact JSON of `record`.
    """
    plaintext = json.dumps(record, separators=(",", ":")).encode()
    return aes_ctr_encrypt(plaintext, key, iv)


def build_envelope(
    attrs: QueryAttributes,
    zone: ZoneConfig,
    key_material: KeyMaterial,
    hashed_device_id: str,
    endpoint_path: str = "/update/v3",
) -> RequestEnvelope:
    """
    Build the complete request for one query.

    The carrier id override of `attrs` replaces the zone default for this
    request only.

    Args:
        attrs: Normalized query attributes.
        zone: Zone configuration from the registry.
        key_material: Fresh key material for this request.
        hashed_device_id: Hashed device identifier.
        endpoint_path: Endpoint path on the zone host.

    Returns:
        RequestEnvelope.

    Raises:
        HeaderBuildError: If a required header value is empty.
    """
    zone = zone.with_carrier_id(attrs.carrier_id)
    headers = build_headers(attrs, key_material, zone, hashed_device_id)
    record = build_request_record(attrs, hashed_device_id, zone.carrier_id)
    return RequestEnvelope(
        url=f"https://{zone.host}{endpoint_path}",
        headers=headers,
        body=build_request_body(record, key_material.key, key_material.iv),
        iv=key_material.iv,
    )
