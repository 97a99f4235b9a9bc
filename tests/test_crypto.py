# Tests for machine-bound key derivation and the AES-256-GCM token codec
#
# Coverage:
#   - Key derivation: length, determinism, identity sensitivity
#   - Token shape and round-trip (empty, binary, non-ASCII)
#   - Tamper detection on ciphertext, tag and nonce
#   - Cross-machine failure
#   - Malformed tokens

import json
import pytest

from exportvault import config
from exportvault.crypto import CryptoManager, MachineIdentity, derive_machine_key
from exportvault.errors import DecryptionError

from conftest import HOME_IDENTITY


def _flip_hex(value: str, index: int) -> str:
    """Flip the lowest bit of one hex digit."""
    digit = format(int(value[index], 16) ^ 1, "x")
    return value[:index] + digit + value[index + 1:]


def _tamper(token: str, field: str, index: int = 0) -> str:
    data = json.loads(token)
    data[field] = _flip_hex(data[field], index)
    return json.dumps(data)


# ── Key derivation ──────────────────────────────────────────────────


def test_derived_key_is_32_bytes(machine_key):
    assert len(machine_key) == config.KEY_SIZE


def test_derivation_is_deterministic(machine_key):
    assert derive_machine_key(HOME_IDENTITY) == machine_key


def test_each_identity_attribute_changes_key(machine_key):
    for attribute in MachineIdentity._fields:
        changed = HOME_IDENTITY._replace(**{attribute: "something-else"})
        assert derive_machine_key(changed) != machine_key


def test_current_identity_is_populated():
    identity = MachineIdentity.current()
    assert identity.hostname
    assert identity.platform
    assert len(identity) == 4


def test_identity_joined_with_separator():
    assert HOME_IDENTITY.joined() == "workstation|alice|linux|x86_64"


def test_manager_derives_from_identity(machine_key):
    assert CryptoManager(identity=HOME_IDENTITY).key == machine_key


# ── Round trip ──────────────────────────────────────────────────────


@pytest.mark.parametrize("plaintext", [
    b"",
    b"hello",
    "pässwörd ✓ 密码".encode("utf-8"),
    bytes(range(256)),
])
def test_round_trip(crypto, plaintext):
    assert crypto.decrypt(crypto.encrypt(plaintext)) == plaintext


def test_text_plaintext_is_utf8_encoded(crypto):
    assert crypto.decrypt(crypto.encrypt("naïve")) == "naïve".encode("utf-8")


def test_token_shape(crypto):
    data = json.loads(crypto.encrypt(b"secret"))
    assert set(data) == {"iv", "authTag", "encrypted"}
    assert len(bytes.fromhex(data["iv"])) == config.NONCE_SIZE
    assert len(bytes.fromhex(data["authTag"])) == config.TAG_SIZE
    assert bytes.fromhex(data["encrypted"]) != b"secret"


def test_fresh_nonce_per_encryption(crypto):
    first = json.loads(crypto.encrypt(b"same"))
    second = json.loads(crypto.encrypt(b"same"))
    assert first["iv"] != second["iv"]
    assert first["encrypted"] != second["encrypted"]


def test_decrypt_accepts_bytes_token(crypto):
    token = crypto.encrypt(b"payload").encode("utf-8")
    assert crypto.decrypt(token) == b"payload"


# ── Tamper detection ────────────────────────────────────────────────


def test_tampered_ciphertext_fails(crypto):
    token = crypto.encrypt(b"the quick brown fox")
    for index in (0, 5, 17):
        with pytest.raises(DecryptionError):
            crypto.decrypt(_tamper(token, "encrypted", index))


def test_tampered_tag_fails(crypto):
    token = crypto.encrypt(b"the quick brown fox")
    for index in (0, 31):
        with pytest.raises(DecryptionError):
            crypto.decrypt(_tamper(token, "authTag", index))


def test_tampered_tag_fails_for_empty_plaintext(crypto):
    token = crypto.encrypt(b"")
    with pytest.raises(DecryptionError):
        crypto.decrypt(_tamper(token, "authTag"))


def test_tampered_nonce_fails(crypto):
    token = crypto.encrypt(b"payload")
    with pytest.raises(DecryptionError):
        crypto.decrypt(_tamper(token, "iv"))


def test_truncated_tag_fails(crypto):
    data = json.loads(crypto.encrypt(b"payload"))
    data["authTag"] = data["authTag"][:8]
    with pytest.raises(DecryptionError):
        crypto.decrypt(json.dumps(data))


# ── Cross machine ───────────────────────────────────────────────────


def test_token_from_other_machine_fails(crypto, other_crypto):
    token = other_crypto.encrypt(b"built elsewhere")
    with pytest.raises(DecryptionError):
        crypto.decrypt(token)


# ── Malformed tokens ────────────────────────────────────────────────


@pytest.mark.parametrize("token", [
    "",
    "not json",
    "[1, 2, 3]",
    '{"iv": "00"}',
    '{"iv": 1, "authTag": 2, "encrypted": 3}',
    '{"iv": "zz", "authTag": "00", "encrypted": "00"}',
    '{"iv": "", "authTag": "", "encrypted": ""}',
])
def test_malformed_token_fails(crypto, token):
    with pytest.raises(DecryptionError):
        crypto.decrypt(token)


def test_is_token(crypto):
    assert crypto.is_token(crypto.encrypt(b"x"))
    assert crypto.is_token('{"iv": "zz", "authTag": "", "encrypted": ""}')
    assert not crypto.is_token('{"credentials": []}')
    assert not crypto.is_token(b"\xff\xfe")
    assert not crypto.is_token("name,password")
    assert not crypto.is_token("[" * 200000)
