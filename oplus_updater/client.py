# SPDX-License-Identifier: MIT
# Copyright (c) 2025 oplus-updater contributors


from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Optional, Tuple

import requests

from .attributes import QueryAttributes
from .config import DEFAULT_CONFIG, UpdaterConfig
from .crypto import KeyMaterial, generate_key_material
from .deviceid import current_device_id, hash_device_id
from .errors import MalformedEnvelopeError, TransportError
from .manifest import UpdateManifest
from .messages import RequestEnvelope, build_envelope
from .responses import decode_manifest, decrypt_response, parse_response
from .transport import session_for
from .zones import resolve_zone

logger = logging.getLogger(__name__)


class UpdaterClient:
    """
    Update-check service client.

    Every query uses fresh key material; nothing is cached between queries.

    Args:
        cfg: Client configuration. Defaults to DEFAULT_CONFIG.
        session: Optional requests.Session used for every query. When omitted,
            a session is built per query from the attributes' proxy spec.
    """

    def __init__(self, cfg: UpdaterConfig = DEFAULT_CONFIG, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.sess = session

    def build_request(self, attrs: QueryAttributes) -> Tuple[RequestEnvelope, KeyMaterial]:
        """
        Run every request-building stage without touching the network.

        Args:
            attrs: Query attributes (normalized here).

        Returns:
            (envelope, key_material) for one request.

        Raises:
            MissingRequiredInput, UnknownZone, RandomSourceError, KeyWrapError,
            HeaderBuildError: On builder failures.
        """
        attrs = attrs.normalized()
        zone = resolve_zone(attrs.zone, self.cfg.zones)
        hashed_id = hash_device_id(current_device_id(self.cfg.device_id))
        key_material = generate_key_material(zone)
        envelope = build_envelope(
            attrs, zone, key_material, hashed_id, endpoint_path=self.cfg.endpoint_path
        )
        logger.debug(
            "Built request for %s (zone=%s, carrier=%s, mode=%s)",
            attrs.ota_version,
            zone.code,
            envelope.headers["nvCarrier"],
            attrs.mode,
        )
        return envelope, key_material

    def _post(self, sess: requests.Session, envelope: RequestEnvelope) -> requests.Response:
        headers = dict(envelope.headers)
        headers["User-Agent"] = self.cfg.user_agent
        try:
            return sess.post(
                envelope.url,
                data=envelope.wire_body(),
                headers=headers,
                timeout=self.cfg.request_timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"POST {envelope.url} failed: {exc}") from exc

    def query_raw(self, attrs: QueryAttributes) -> bytes:
        """
        Query the service and return the decrypted manifest bytes.

        Args:
            attrs: Query attributes.

        Returns:
            Decrypted plaintext (JSON) bytes.

        Raises:
            UpdaterError: Builder errors before any network call; TransportError,
                ServerRejected or MalformedEnvelopeError afterwards.
        """
        envelope, key_material = self.build_request(attrs)
        own = self.sess is None
        with (session_for(attrs.proxy) if own else nullcontext(self.sess)) as sess:
            r = self._post(sess, envelope)
        logger.debug("HTTP %s from %s (%d bytes)", r.status_code, envelope.url, len(r.content))
        try:
            result = parse_response(r.content)
        except MalformedEnvelopeError:
            if not r.ok:
                raise TransportError(f"HTTP {r.status_code} from {envelope.url}") from None
            raise
        return decrypt_response(result, key_material.key)

    def query(self, attrs: QueryAttributes) -> UpdateManifest:
        """
        Query the service and decode the update manifest.

        Raises:
            MalformedManifestError: If the decrypted payload is not a manifest.
        """
        return decode_manifest(self.query_raw(attrs))


def query_update(attrs: QueryAttributes, cfg: UpdaterConfig = DEFAULT_CONFIG) -> UpdateManifest:
    """Convenience wrapper: one query with a throwaway client."""
    return UpdaterClient(cfg).query(attrs)
