import time

import pytest

from oplus_updater import crypto
from oplus_updater.crypto import (
    IV_SIZE,
    KEY_SIZE,
    aes_ctr_decrypt,
    aes_ctr_encrypt,
    generate_key_material,
    protected_version,
    random_iv,
    random_key,
    wrap_key,
)
from oplus_updater.errors import KeyWrapError, RandomSourceError

from .conftest import unwrap_key


def test_key_and_iv_widths():
    assert len(random_key()) == KEY_SIZE == 32
    assert len(random_iv()) == IV_SIZE == 16


def test_key_and_iv_are_fresh():
    assert random_key() != random_key()
    assert random_iv() != random_iv()


def test_random_source_failure(monkeypatch):
    def broken(n):
        raise OSError("no entropy")

    monkeypatch.setattr(crypto, "get_random_bytes", broken)
    with pytest.raises(RandomSourceError):
        random_key()


def test_wrap_unwrap_round_trip(rsa_key):
    key = random_key()
    wrapped = wrap_key(key, rsa_key.public_key().export_key().decode())
    assert unwrap_key(rsa_key, wrapped) == key


def test_wrap_is_randomized(rsa_key):
    pem = rsa_key.public_key().export_key().decode()
    key = random_key()
    assert wrap_key(key, pem) != wrap_key(key, pem)


def test_wrap_rejects_malformed_key():
    with pytest.raises(KeyWrapError):
        wrap_key(random_key(), "-----BEGIN PUBLIC KEY-----\nnope\n-----END PUBLIC KEY-----")


def test_protected_version_is_a_day_ahead():
    now = time.time_ns()
    marker = int(protected_version())
    assert now + 23 * 3600 * 10**9 < marker < now + 25 * 3600 * 10**9


def test_generate_key_material(test_zone, rsa_key):
    km = generate_key_material(test_zone)
    assert km.negotiation_version == "1234567890"
    assert unwrap_key(rsa_key, km.wrapped_key) == km.key
    assert repr(km.key) not in repr(km)
    assert repr(km.iv) not in repr(km)
    scene = km.scene_descriptor()["SCENE_1"]
    assert scene == {
        "protectedKey": km.wrapped_key,
        "version": km.protected_version,
        "negotiationVersion": "1234567890",
    }


def test_fresh_material_per_call(test_zone):
    a, b = generate_key_material(test_zone), generate_key_material(test_zone)
    assert a.key != b.key
    assert a.iv != b.iv


def test_ctr_keeps_length_and_round_trips():
    key, iv = random_key(), random_iv()
    for size in (0, 1, 15, 16, 17, 1000):
        data = bytes(range(256)) * 4
        data = data[:size]
        enc = aes_ctr_encrypt(data, key, iv)
        assert len(enc) == size
        assert aes_ctr_decrypt(enc, key, iv) == data


def test_ctr_matches_manual_keystream():
    # AES-CTR with the IV as the full 128-bit counter block
    from Crypto.Cipher import AES

    key, iv = bytes(32), bytes(16)
    ecb = AES.new(key, AES.MODE_ECB)
    block0 = ecb.encrypt(bytes(16))
    block1 = ecb.encrypt((1).to_bytes(16, "big"))
    assert aes_ctr_encrypt(bytes(32), key, iv) == block0 + block1
