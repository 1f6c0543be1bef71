import base64
import json

import pytest

from oplus_updater.crypto import random_key
from oplus_updater.errors import MalformedEnvelopeError, MalformedManifestError, ServerRejected
from oplus_updater.responses import (
    ResponseEnvelope,
    decode_manifest,
    decrypt_manifest,
    decrypt_response,
    parse_response,
)

from .conftest import SAMPLE_MANIFEST, encrypted_body


class ExplodingBody(str):
    """A body that fails the test if anything tries to parse it."""

    def __getattribute__(self, name):
        raise AssertionError(f"body was accessed ({name})")


def test_server_rejected_skips_body():
    env = ResponseEnvelope.model_construct(responseCode=500, body=ExplodingBody(), errMsg="boom")
    with pytest.raises(ServerRejected) as exc_info:
        decrypt_response(env, random_key())
    assert exc_info.value.code == 500
    assert exc_info.value.message == "boom"


def test_crafted_envelope_decrypts_exactly():
    key = random_key()
    plaintext = b'{"hello": "world"}'
    env = ResponseEnvelope(responseCode=200, body=encrypted_body(plaintext, key, bytes(16)))
    assert decrypt_response(env, key) == plaintext


def test_wrong_key_yields_garbage_then_manifest_error():
    key = random_key()
    env = ResponseEnvelope(
        responseCode=200, body=encrypted_body(json.dumps(SAMPLE_MANIFEST).encode(), key, bytes(16))
    )
    with pytest.raises(MalformedManifestError):
        decrypt_manifest(env, random_key())


@pytest.mark.parametrize(
    "body",
    [
        None,
        {"iv": "", "cipher": ""},
        "not json",
        json.dumps({"iv": base64.b64encode(bytes(16)).decode()}),
        json.dumps({"iv": "***", "cipher": "AAAA"}),
        json.dumps({"iv": base64.b64encode(bytes(8)).decode(), "cipher": "AAAA"}),
        json.dumps({"iv": 1, "cipher": "AAAA"}),
    ],
)
def test_malformed_envelope_body(body):
    env = ResponseEnvelope(responseCode=200, body=body)
    with pytest.raises(MalformedEnvelopeError):
        decrypt_response(env, random_key())


def test_parse_response():
    env = parse_response(b'{"responseCode": 2004, "body": null, "errMsg": "no modify"}')
    assert env.responseCode == 2004
    assert env.errMsg == "no modify"


@pytest.mark.parametrize("raw", [b"", b"<html>", b"[]", b'{"body": "x"}'])
def test_parse_response_malformed(raw):
    with pytest.raises(MalformedEnvelopeError):
        parse_response(raw)


def test_decrypt_manifest_round_trip():
    key = random_key()
    env = ResponseEnvelope(
        responseCode=200, body=encrypted_body(json.dumps(SAMPLE_MANIFEST).encode(), key, bytes(16))
    )
    manifest = decrypt_manifest(env, key)
    assert manifest.real_version_name == "RMX3820_14.0.0.800(EX01)"


@pytest.mark.parametrize("plaintext", [b"", b"\xff\xfe", b"[1, 2]", b'{"versionCode": "abc"}'])
def test_decode_manifest_malformed(plaintext):
    with pytest.raises(MalformedManifestError):
        decode_manifest(plaintext)
