"""Examples of using oplus_updater: high-level query and the step-by-step flow."""

import json
import logging

from oplus_updater import QueryAttributes, UpdaterClient, query_update
from oplus_updater.config import load_config
from oplus_updater.errors import ServerRejected, UpdaterError


def main_high_level(ota_version: str, zone: str) -> None:
    """High-level API: one call returning a typed manifest.

    Args:
        ota_version: OTA version (e.g., "RMX3820_11.A").
        zone: Server zone (CN, EU or IN).
    """
    try:
        manifest = query_update(QueryAttributes(ota_version=ota_version, zone=zone))
    except ServerRejected as e:
        print(f"No update: {e}")
        return

    print(f"Version: {manifest.real_version_name}")
    print(f"OS: {manifest.real_os_version} ({manifest.real_android_version})")
    print(f"Security patch: {manifest.security_patch}")
    for comp in manifest.components:
        print(f"- {comp.component_name}: {comp.component_packets.manual_url}")


def main_step_by_step(ota_version: str, zone: str) -> None:
    """Step-by-step flow: build the request offline, then send it.

    Args:
        ota_version: OTA version.
        zone: Server zone.
    """
    client = UpdaterClient(load_config())
    attrs = QueryAttributes(ota_version=ota_version, zone=zone, mode=1)

    envelope, _ = client.build_request(attrs)
    print(f"POST {envelope.url}")
    print(f"Carrier: {envelope.headers['nvCarrier']}, body: {len(envelope.body)} bytes")

    try:
        raw = client.query_raw(attrs)
    except UpdaterError as e:
        print(f"Query failed: {e}")
        return
    print(json.dumps(json.loads(raw), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    # Defaults (edit as needed or use the oplus-updater CLI)
    default_ota = "RMX3820_11.A"
    default_zone = "CN"

    main_high_level(default_ota, default_zone)

    # Step-by-step flow (uncomment to run)
    # main_step_by_step(default_ota, default_zone)
