# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors

"""
Update-check response parsing and decryption.

Decoding happens in two typed stages: the response envelope and its
{iv, cipher} body first, then, after AES-CTR decryption, the manifest.

Functions:
- parse_response: validate the top-level response JSON.
- decrypt_response: check responseCode and decrypt the body to plaintext bytes.
- decode_manifest: decode decrypted plaintext into an UpdateManifest.
- decrypt_manifest: decrypt_response followed by decode_manifest.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from .crypto import IV_SIZE, aes_ctr_decrypt
from .errors import MalformedEnvelopeError, MalformedManifestError, ServerRejected
from .manifest import UpdateManifest

logger = logging.getLogger(__name__)


class ResponseEnvelope(BaseModel):
    """Top-level answer: {responseCode, body, errMsg}."""

    responseCode: int
    body: Any = None
    errMsg: Optional[str] = ""


class CipherEnvelope(BaseModel):
    """Decoded `body` of a successful answer; both fields are base64."""

    iv: str
    cipher: str


def parse_response(raw: bytes | str) -> ResponseEnvelope:
    """
    Validate the raw HTTP body as a response envelope.

    Args:
        raw: HTTP response body.

    Returns:
        ResponseEnvelope.

    Raises:
        MalformedEnvelopeError: If the body is not JSON of the expected shape.
    """
    try:
        return ResponseEnvelope.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedEnvelopeError(f"Unexpected response envelope: {exc}") from exc


def _b64(value: str, name: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEnvelopeError(f"Field {name!r} is not valid base64") from exc


def decrypt_response(envelope: ResponseEnvelope, key: bytes) -> bytes:
    """
    Decrypt the body of a response envelope.

    Args:
        envelope: Parsed response envelope.
        key: Symmetric key used for the request.

    Returns:
        Decrypted plaintext bytes. There is no integrity check; a wrong key
        yields garbage that only fails later when decoded.

    Raises:
        ServerRejected: If responseCode is not 200 (body is not looked at).
        MalformedEnvelopeError: If body is not a JSON {iv, cipher} string or
            either field is not base64.
    """
    if envelope.responseCode != 200:
        raise ServerRejected(envelope.responseCode, envelope.errMsg or "")

    if not isinstance(envelope.body, str):
        raise MalformedEnvelopeError(
            f"Response body must be a JSON string, got {type(envelope.body).__name__}"
        )
    try:
        cipher_env = CipherEnvelope.model_validate_json(envelope.body)
    except ValidationError as exc:
        raise MalformedEnvelopeError(f"Response body is not an {{iv, cipher}} object: {exc}") from exc

    iv = _b64(cipher_env.iv, "iv")
    data = _b64(cipher_env.cipher, "cipher")
    if len(iv) != IV_SIZE:
        raise MalformedEnvelopeError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
    logger.debug("Decrypting %d bytes of response cipher", len(data))
    return aes_ctr_decrypt(data, key, iv)


def decode_manifest(plaintext: bytes) -> UpdateManifest:
    """
    Decode decrypted plaintext into an UpdateManifest.

    Raises:
        MalformedManifestError: If the plaintext is not a JSON manifest.
    """
    try:
        return UpdateManifest.model_validate_json(plaintext)
    except ValidationError as exc:
        raise MalformedManifestError(f"Decrypted payload is not a manifest: {exc}") from exc


def decrypt_manifest(envelope: ResponseEnvelope, key: bytes) -> UpdateManifest:
    """Decrypt a response envelope and decode the manifest."""
    return decode_manifest(decrypt_response(envelope, key))
