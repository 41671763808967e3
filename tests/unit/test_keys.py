"""Tests for key holders and the key-parsing service."""

from __future__ import annotations

from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from jws_compact.errors import JwsError, JwsErrorCode
from jws_compact.keys import (
    KeySlot,
    SecretKey,
    load_private_key,
    load_public_key,
    read_key_material,
)


def test_secret_key_wipe_zeroes_buffer() -> None:
    key = SecretKey("top-secret")
    buffer = key.material

    key.wipe()

    assert buffer == bytearray(len("top-secret"))
    assert len(key) == 0
    with pytest.raises(JwsError) as exc_info:
        key.material
    assert exc_info.value.code == JwsErrorCode.KEY_NOT_SET


def test_secret_key_context_manager_wipes() -> None:
    with SecretKey(b"abc") as key:
        buffer = key.material
        assert bytes(buffer) == b"abc"

    assert buffer == bytearray(3)


def test_secret_key_rejects_empty_material() -> None:
    with pytest.raises(JwsError) as exc_info:
        SecretKey(b"")

    assert exc_info.value.code == JwsErrorCode.INVALID_KEY


def test_secret_key_repr_hides_material() -> None:
    assert "hunter2" not in repr(SecretKey("hunter2"))


def test_key_slot_transitions() -> None:
    released: list[str] = []
    slot: KeySlot[str] = KeySlot("public", release=released.append)

    assert not slot.is_set
    with pytest.raises(JwsError) as exc_info:
        slot.require()
    assert exc_info.value.code == JwsErrorCode.KEY_NOT_SET
    assert exc_info.value.details == {"role": "public"}

    slot.replace("first")
    slot.replace("second")
    assert slot.require() == "second"
    assert released == ["first"]

    slot.replace("second")
    assert released == ["first"]

    slot.release()
    slot.release()
    assert released == ["first", "second"]
    assert not slot.is_set


def test_read_key_material_sources(tmp_path: Path) -> None:
    path = tmp_path / "key.pem"
    path.write_bytes(b"PEM DATA")

    assert read_key_material(path) == b"PEM DATA"
    assert read_key_material(f"file://{path}") == b"PEM DATA"
    assert read_key_material("inline") == b"inline"
    assert read_key_material(bytearray(b"raw")) == b"raw"


def test_read_key_material_rejects_unknown_types() -> None:
    with pytest.raises(JwsError) as exc_info:
        read_key_material(42)  # type: ignore[arg-type]

    assert exc_info.value.code == JwsErrorCode.INVALID_KEY


def test_missing_key_file(tmp_path: Path) -> None:
    with pytest.raises(JwsError) as exc_info:
        read_key_material(f"file://{tmp_path / 'missing.pem'}")

    assert exc_info.value.code == JwsErrorCode.INVALID_KEY
    assert isinstance(exc_info.value.__cause__, OSError)


def test_load_keys(rsa_pair) -> None:
    assert isinstance(load_private_key(rsa_pair.private_pem), rsa.RSAPrivateKey)
    assert isinstance(
        load_private_key(rsa_pair.encrypted_private_pem, rsa_pair.passphrase), rsa.RSAPrivateKey
    )
    assert isinstance(load_public_key(rsa_pair.public_pem.decode("ascii")), rsa.RSAPublicKey)
    assert isinstance(load_public_key(rsa_pair.certificate_pem), rsa.RSAPublicKey)


@pytest.mark.parametrize("passphrase", [11, 3.5, ["secret"]])
def test_private_key_loader_rejects_passphrase_type(rsa_pair, passphrase: object) -> None:
    with pytest.raises(JwsError) as exc_info:
        load_private_key(rsa_pair.encrypted_private_pem, passphrase)  # type: ignore[arg-type]

    assert exc_info.value.code == JwsErrorCode.INVALID_KEY
    assert exc_info.value.details["type"] == type(passphrase).__name__


def test_public_key_loader_rejects_private_pem(rsa_pair) -> None:
    with pytest.raises(JwsError) as exc_info:
        load_public_key(rsa_pair.private_pem)

    assert exc_info.value.code == JwsErrorCode.INVALID_KEY
