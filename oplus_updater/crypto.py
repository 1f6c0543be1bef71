# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Updater crypto helpers: random key material, RSA key wrapping and AES-CTR.

The service uses a hybrid scheme: a fresh AES-256 key encrypts the request in
counter mode (no padding), and the key itself travels RSA-OAEP encrypted under
the zone public key. A key/IV pair must never be reused.
"""

from __future__ import annotations

import base64
import time
from dataclasses import dataclass, field

from Crypto.Cipher import AES, PKCS1_OAEP
from Crypto.PublicKey import RSA
from Crypto.Random import get_random_bytes

from .errors import KeyWrapError, RandomSourceError
from .zones import ZoneConfig

KEY_SIZE: int = 32
IV_SIZE: int = AES.block_size
SCENE: str = "SCENE_1"

# protectedKey "version" is an expiry timestamp, one day ahead, in nanoseconds
_PROTECTED_KEY_TTL_NS: int = 10**9 * 60 * 60 * 24


@dataclass(frozen=True)
class KeyMaterial:
    """
    Per-request key material.

    Attributes:
        key: AES-256 key (never logged).
        iv: 16-byte initial counter block (never logged).
        wrapped_key: Base64 RSA-OAEP ciphertext of the base64-encoded key.
        negotiation_version: Public-key version of the zone used for wrapping.
        protected_version: Wrapping scheme marker sent with the wrapped key.
    """

    key: bytes = field(repr=False)
    iv: bytes = field(repr=False)
    wrapped_key: str
    negotiation_version: str
    protected_version: str

    def scene_descriptor(self) -> dict:
        """Return the protectedKey map sent in request headers."""
        return {
            SCENE: {
                "protectedKey": self.wrapped_key,
                "version": self.protected_version,
                "negotiationVersion": self.negotiation_version,
            }
        }


def _random_bytes(n: int) -> bytes:
    try:
        data = get_random_bytes(n)
    except Exception as exc:
        raise RandomSourceError(f"Secure random source failed: {exc}") from exc
    if len(data) != n:
        raise RandomSourceError(f"Secure random source returned {len(data)} of {n} bytes")
    return data


def random_key() -> bytes:
    """Return a fresh 32-byte AES-256 key."""
    return _random_bytes(KEY_SIZE)


def random_iv() -> bytes:
    """Return a fresh 16-byte AES-CTR initial counter block."""
    return _random_bytes(IV_SIZE)


def wrap_key(key: bytes, public_key_pem: str) -> str:
    """
    Encrypt a symmetric key under an RSA public key.

    The service expects the base64 text of the key, not the raw bytes, to be
    RSA-OAEP (SHA-1) encrypted; the result is base64-encoded.

    Args:
        key: Symmetric key bytes.
        public_key_pem: RSA public key in PEM format.

    Returns:
        Base64-encoded wrapped key.

    Raises:
        KeyWrapError: If the PEM is malformed or encryption fails.
    """
    try:
        rsa_key = RSA.import_key(public_key_pem)
    except (ValueError, IndexError, TypeError) as exc:
        raise KeyWrapError(f"Malformed public key: {exc}") from exc
    if rsa_key.has_private():
        rsa_key = rsa_key.public_key()
    try:
        ciphertext = PKCS1_OAEP.new(rsa_key).encrypt(base64.b64encode(key))
    except (ValueError, TypeError) as exc:
        raise KeyWrapError(f"RSA encryption failed: {exc}") from exc
    return base64.b64encode(ciphertext).decode()


def protected_version() -> str:
    """Return the protectedKey version marker (expiry timestamp in ns)."""
    return str(time.time_ns() + _PROTECTED_KEY_TTL_NS)


def generate_key_material(zone: ZoneConfig) -> KeyMaterial:
    """
    Generate fresh key material wrapped for a zone.

    Args:
        zone: Target zone configuration.

    Returns:
        KeyMaterial with a new key and IV.

    Raises:
        RandomSourceError: If the random source fails.
        KeyWrapError: If wrapping under the zone key fails.
    """
    key = random_key()
    iv = random_iv()
    return KeyMaterial(
        key=key,
        iv=iv,
        wrapped_key=wrap_key(key, zone.public_key),
        negotiation_version=zone.public_key_version,
        protected_version=protected_version(),
    )


def _ctr(key: bytes, iv: bytes):
    if len(iv) != IV_SIZE:
        raise ValueError(f"IV must be {IV_SIZE} bytes, got {len(iv)}")
    return AES.new(key, AES.MODE_CTR, nonce=b"", initial_value=iv)


def aes_ctr_encrypt(data: bytes, key: bytes, iv: bytes) -> bytes:
    """
    Encrypt data using AES-CTR with `iv` as the full initial counter block.

    Args:
        data: Plaintext bytes.
        key: AES key (16/24/32 bytes).
        iv: 16-byte initial counter block.

    Returns:
        Ciphertext bytes, same length as `data`.
    """
    return _ctr(key, iv).encrypt(data)


def aes_ctr_decrypt(data: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt AES-CTR ciphertext produced with the same key and IV."""
    return _ctr(key, iv).decrypt(data)
