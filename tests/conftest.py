"""Global test fixtures and environment setup."""

from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from jws_compact.logging import reset_logging

PRIVATE_KEY_PASSPHRASE = b"L@mb0rghini"


@dataclass(frozen=True)
class RsaKeyPair:
    private_key: rsa.RSAPrivateKey
    passphrase: bytes = PRIVATE_KEY_PASSPHRASE

    @property
    def private_pem(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    @property
    def encrypted_private_pem(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(PRIVATE_KEY_PASSPHRASE),
        )

    @property
    def public_pem(self) -> bytes:
        return self.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    @property
    def certificate_pem(self) -> bytes:
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "jws-compact tests")])
        now = dt.datetime.now(dt.timezone.utc)
        certificate = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(self.private_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now - dt.timedelta(days=1))
            .not_valid_after(now + dt.timedelta(days=1))
            .sign(self.private_key, hashes.SHA256())
        )
        return certificate.public_bytes(serialization.Encoding.PEM)


def _generate_pair() -> RsaKeyPair:
    return RsaKeyPair(rsa.generate_private_key(public_exponent=65537, key_size=2048))


@pytest.fixture(scope="session")
def rsa_pair() -> RsaKeyPair:
    return _generate_pair()


@pytest.fixture(scope="session")
def other_rsa_pair() -> RsaKeyPair:
    return _generate_pair()


@pytest.fixture()
def rsa_key_files(tmp_path: Path, rsa_pair: RsaKeyPair) -> dict[str, Path]:
    files = {
        "private": tmp_path / "prv-one.key",
        "encrypted": tmp_path / "prv-one-encrypted.key",
        "public": tmp_path / "pub-one.pem",
        "certificate": tmp_path / "pub-one.crt",
    }
    files["private"].write_bytes(rsa_pair.private_pem)
    files["encrypted"].write_bytes(rsa_pair.encrypted_private_pem)
    files["public"].write_bytes(rsa_pair.public_pem)
    files["certificate"].write_bytes(rsa_pair.certificate_pem)
    return files


@pytest.fixture(autouse=True)
def _isolate_jws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep JWS_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("JWS_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _reset_jws_logging() -> Iterator[None]:
    """Drop handlers installed by ``setup_logging`` so streams don't leak between tests."""
    yield
    reset_logging()
