# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Updater package error definitions.

This module defines the exceptions used across the updater package. Errors
raised while building a request (zone lookup, key generation, key wrapping,
header/body construction) always surface before any network call is made.

Exceptions:
    UpdaterError: Base class for all updater errors.
    MissingRequiredInput: A required query attribute is empty.
    UnknownZone: The zone code is not one of the supported zones.
    RandomSourceError: The secure random source failed.
    KeyWrapError: The symmetric key could not be wrapped under the zone key.
    HeaderBuildError: A required header value is empty after normalization.
    InvalidProxyError: The proxy specification is malformed (recoverable).
    TransportError: Network-level failure while talking to the service.
    ServerRejected: The service answered with a non-200 responseCode.
    MalformedEnvelopeError: The response envelope is not the expected shape.
    MalformedManifestError: The decrypted plaintext is not a valid manifest.
"""


class UpdaterError(Exception):
    """Base class for updater errors."""


class MissingRequiredInput(UpdaterError):
    """Raised when a required query attribute is missing."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Missing required input: {field_name}")


class UnknownZone(UpdaterError):
    """Raised when a zone code is not supported."""

    def __init__(self, code: str, supported: tuple[str, ...] = ()):
        self.code = code
        msg = f"Unknown zone: {code!r}"
        if supported:
            msg += f" (supported: {', '.join(supported)})"
        super().__init__(msg)


class RandomSourceError(UpdaterError):
    """Raised when the cryptographically secure random source fails."""


class KeyWrapError(UpdaterError):
    """Raised on malformed public key material or RSA encryption failure."""


class HeaderBuildError(UpdaterError):
    """Raised when a required header value is still empty."""

    def __init__(self, header: str):
        self.header = header
        super().__init__(f"Header {header!r} is empty after normalization")


class InvalidProxyError(UpdaterError):
    """Raised for malformed proxy specifications.

    Callers recover from this error by falling back to a direct connection.
    """

    def __init__(self, spec: str, reason: str = ""):
        self.spec = spec
        msg = f"Invalid proxy {spec!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class TransportError(UpdaterError):
    """Raised for network-level failures (connection, TLS, timeout, HTTP)."""


class ServerRejected(UpdaterError):
    """Raised when the service returns a responseCode other than 200."""

    def __init__(self, code: int, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(f"response code: {code}, message: {message}")


class MalformedEnvelopeError(UpdaterError):
    """Raised when the response envelope or its {iv, cipher} body is malformed."""


class MalformedManifestError(UpdaterError):
    """Raised when decrypted plaintext does not decode into a manifest."""
