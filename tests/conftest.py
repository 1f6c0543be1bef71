"""Shared fixtures: a throwaway RSA zone and an in-process fake update server."""

import base64
import json
from types import MappingProxyType

import pytest
from Crypto.Cipher import PKCS1_OAEP
from Crypto.PublicKey import RSA

from oplus_updater.config import UpdaterConfig
from oplus_updater.crypto import aes_ctr_decrypt, aes_ctr_encrypt, random_iv
from oplus_updater.zones import ZoneConfig

SAMPLE_MANIFEST = {
    "parent": "RMX3820",
    "components": [
        {
            "componentId": "my_manifest_RMX3820_11.F.17_3170_202405291445",
            "componentName": "my_manifest",
            "componentVersion": "RMX3820_11.F.17_3170_202405291445",
            "componentPackets": {
                "size": "5893283840",
                "vabInfo": {
                    "data": {
                        "otaStreamingProperty": "payload_metadata.bin:2813:377441",
                        "vab_package_hash": "abc",
                        "extra_params": "",
                        "header": ["FILE_HASH=xyz"],
                    }
                },
                "manualUrl": "https://example.invalid/manual.zip",
                "id": "pkg-1",
                "type": "1",
                "url": "https://example.invalid/auto.zip",
                "md5": "0123456789abcdef",
            },
        }
    ],
    "securityPatch": "2024-05-05",
    "realVersionName": "RMX3820_14.0.0.800(EX01)",
    "realOsVersion": "realme UI 5.0",
    "realAndroidVersion": "Android 14",
    "realOtaVersion": "RMX3820_11.F.17_3170_202405291445",
    "description": {"opex": {}, "share": "s", "panelUrl": "p", "url": "u", "firstTitle": "t"},
    "versionTypeId": "1",
    "versionCode": 1400,
    "versionName": "RMX3820_11.F.17",
    "decentralize": {"strategyVersion": "v1", "round": 2, "offset": 30},
    "reminderValue": {
        "download": {"notice": [1, 3], "pop": [7], "version": "1"},
        "upgrade": {"notice": [], "pop": [], "version": "1"},
    },
    "isConfidential": 0,
    "betaTasteInteract": True,
    "silenceUpdate": 1,
    "gkaReq": 0,
    "publishedTime": 1717000000000,
    "colorOSVersion": "ColorOS14.0.0",
    "nvId16": "01000100",
    "someFutureField": {"ignored": True},
}


@pytest.fixture(scope="session")
def rsa_key():
    return RSA.generate(2048)


@pytest.fixture(scope="session")
def test_zone(rsa_key):
    return ZoneConfig(
        code="CN",
        host="ota.test.invalid",
        public_key=rsa_key.public_key().export_key().decode(),
        public_key_version="1234567890",
        carrier_id="10010111",
        language="zh-CN",
    )


@pytest.fixture
def test_config(test_zone):
    return UpdaterConfig(device_id="test-device", zones=MappingProxyType({"CN": test_zone}))


def unwrap_key(rsa_key, wrapped_b64: str) -> bytes:
    """Server-side inverse of wrap_key."""
    key_b64 = PKCS1_OAEP.new(rsa_key).decrypt(base64.b64decode(wrapped_b64))
    return base64.b64decode(key_b64)


def encrypted_body(payload: bytes, key: bytes, iv: bytes) -> str:
    return json.dumps(
        {
            "iv": base64.b64encode(iv).decode(),
            "cipher": base64.b64encode(aes_ctr_encrypt(payload, key, iv)).decode(),
        }
    )


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeServer:
    """Stands in for requests.Session: decrypts requests and answers like the service."""

    def __init__(self, rsa_key, manifest=None, response_code=200, err_msg="", http_status=200):
        self.rsa_key = rsa_key
        self.manifest = SAMPLE_MANIFEST if manifest is None else manifest
        self.response_code = response_code
        self.err_msg = err_msg
        self.http_status = http_status
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        scene = json.loads(headers["protectedKey"])["SCENE_1"]
        key = unwrap_key(self.rsa_key, scene["protectedKey"])
        params = json.loads(json.loads(data)["params"])
        record = json.loads(
            aes_ctr_decrypt(
                base64.b64decode(params["cipher"]), key, base64.b64decode(params["iv"])
            )
        )
        self.calls.append(
            {"url": url, "headers": headers, "timeout": timeout, "record": record, "key": key}
        )
        if self.response_code != 200:
            answer = {"responseCode": self.response_code, "errMsg": self.err_msg, "body": None}
        else:
            payload = json.dumps(self.manifest).encode()
            answer = {
                "responseCode": 200,
                "errMsg": "",
                "body": encrypted_body(payload, key, random_iv()),
            }
        return FakeResponse(json.dumps(answer).encode(), self.http_status)


@pytest.fixture
def fake_server(rsa_key):
    return FakeServer(rsa_key)
