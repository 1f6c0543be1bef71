# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors
"""
Server zone registry.

Each zone is a region-specific deployment of the component OTA service with its
own host, RSA public key and public-key version (the "negotiation version" the
server uses to pick the matching private key).

Functions:
- resolve_zone: look up a zone code in a registry (the built-in one by default).
- build_registry: derive a new registry with per-zone overrides applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .errors import UnknownZone

logger = logging.getLogger(__name__)

DEFAULT_ZONE = "CN"


@dataclass(frozen=True)
class ZoneConfig:
    """
    Immutable description of one server zone.

    Args:
        code: Zone code (CN, EU, IN).
        host: Hostname of the update service for this zone.
        public_key: RSA public key in PEM format used to wrap request keys.
        public_key_version: Identifier of the public key, sent as negotiationVersion.
        carrier_id: Default 8-bit carrier id as a binary string.
        language: Locale sent in the language header.
    """

    code: str
    host: str
    public_key: str
    public_key_version: str
    carrier_id: str
    language: str

    def with_carrier_id(self, carrier_id: str) -> "ZoneConfig":
        """Return a copy using `carrier_id`, or self when the override is empty."""
        if not carrier_id:
            return self
        return replace(self, carrier_id=carrier_id)


_CN_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEApXYGXQpNL7gmMzzvajHa
oZIHQQvBc2cOEhJc7/tsaO4sT0unoQnwQKfNQCuv7qC1Nu32eCLuewe9LSYhDXr9
KSBWjOcCFXVXteLO9WCaAh5hwnUoP/5/Wz0jJwBA+yqs3AaGLA9wJ0+B2lB1vLE4
FZNE7exUfwUc03fJxHG9nCLKjIZlrnAAHjRCd8mpnADwfkCEIPIGhnwq7pdkbamZ
coZfZud1+fPsELviB9u447C6bKnTU4AaMcR9Y2/uI6TJUTcgyCp+ilgU0JxemrSI
PFk3jbCbzamQ6Shkw/jDRzYoXpBRg/2QDkbq+j3ljInu0RHDfOeXf3VBfHSnQ66H
CwIDAQAB
-----END PUBLIC KEY-----"""

_EU_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAh8/EThsK3f0WyyPgrtXb
/D0Xni6UZNppaQHUqHWo976cybl92VxmehE0ISObnxERaOtrlYmTPIxkVC9MMueD
vTwZ1l0KxevZVKU0sJRxNR9AFcw6D7k9fPzzpNJmhSlhpNbt3BEepdgibdRZbacF
3NWy3ejOYWHgxC+I/Vj1v7QU5gD+1OhgWeRDcwuV4nGY1ln2lvkRj8EiJYXfkSq/
wUI5AvPdNXdEqwou4FBcf6mD84G8pKDyNTQwwuk9lvFlcq4mRqgYaFg9DAgpDgqV
K4NTJWM7tQS1GZuRA6PhupfDqnQExyBFhzCefHkEhcFywNyxlPe953NWLFWwbGvF
KwIDAQAB
-----END PUBLIC KEY-----"""

_IN_PUBLIC_KEY = """-----BEGIN PUBLIC KEY-----
MIIBIjANBgkqhkiG9w0BAQEFAAOCAQ8AMIIBCgKCAQEAwYtghkzeStC9YvAwOQmW
ylbp74Tj8hhi3f9IlK7A/CWrGbLgzz/BeKxNb45zBN8pgaaEOwAJ1qZQV5G4nPro
WCPOP1ro1PkemFJvw/vzOOT5uN0ADnHDzZkZXCU/knxqUSfLcwQlHXsYhNsAm7uO
KjY9YXF4zWzYN0eFPkML3Pj/zg7hl/ov9clB2VeyI1/blMHFfcNA/fvqDTENXcNB
IhgJvXiCpLcZqp+aLZPC5AwY/sCb3j5jTWer0Rk0ZjQBZE1AncwYvUx4mA65U59c
WpTyl4c47J29MsQ66hqUv6eBHlhG7DMT6Iw6oRlYQ0jEW3e+wzyIoDoZVqOzrPfq
+wIDAQAB
-----END PUBLIC KEY-----"""

ZONES: Mapping[str, ZoneConfig] = MappingProxyType(
    {
        "CN": ZoneConfig(
            code="CN",
            host="component-ota-cn.allawntech.com",
            public_key=_CN_PUBLIC_KEY,
            public_key_version="1615879139745",
            carrier_id="10010111",
            language="zh-CN",
        ),
        "EU": ZoneConfig(
            code="EU",
            host="component-ota-eu.allawnos.com",
            public_key=_EU_PUBLIC_KEY,
            public_key_version="1615897067573",
            carrier_id="01000100",
            language="en-GB",
        ),
        "IN": ZoneConfig(
            code="IN",
            host="component-ota-in.allawnos.com",
            public_key=_IN_PUBLIC_KEY,
            public_key_version="1615896309308",
            carrier_id="00011011",
            language="en-IN",
        ),
    }
)
"""Built-in zone table, keyed by upper-case zone code."""


def resolve_zone(code: str, registry: Optional[Mapping[str, ZoneConfig]] = None) -> ZoneConfig:
    """
    Resolve a zone code to its configuration.

    Only an empty or blank code falls back to CN; an unrecognized code is an error.

    Args:
        code: Zone code, case-insensitive.
        registry: Zone table to search. Defaults to the built-in ZONES.

    Returns:
        ZoneConfig for the zone.

    Raises:
        UnknownZone: If the code is not in the registry.
    """
    table = ZONES if registry is None else registry
    key = ((code or "").strip() or DEFAULT_ZONE).upper()
    try:
        return table[key]
    except KeyError:
        raise UnknownZone(code, tuple(table)) from None


_OVERRIDABLE = ("host", "public_key", "public_key_version", "carrier_id", "language")


def build_registry(overrides: Mapping[str, Mapping[str, Any]]) -> Mapping[str, ZoneConfig]:
    """
    Build a read-only registry with per-zone overrides applied.

    Args:
        overrides: Mapping of zone code to a mapping of ZoneConfig field overrides,
            e.g. {"EU": {"host": "example.org"}}.

    Returns:
        A new read-only mapping; ZONES itself is never modified.

    Raises:
        UnknownZone: If an override names a zone that is not built in.
        ValueError: If an override names an unknown field.
    """
    table = dict(ZONES)
    for code, fields in overrides.items():
        zone = resolve_zone(code)
        unknown = set(fields) - set(_OVERRIDABLE)
        if unknown:
            raise ValueError(f"Unknown zone override field(s) for {code}: {sorted(unknown)}")
        table[zone.code] = replace(zone, **{k: str(v) for k, v in fields.items()})
        logger.debug("Zone %s overridden: %s", zone.code, sorted(fields))
    return MappingProxyType(table)
