"""Key material holders and the key-parsing service."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Generic, Optional, TypeVar, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .constants import FILE_REFERENCE_PREFIX
from .errors import JwsError, JwsErrorCode

KeyMaterial = Union[bytes, bytearray, str, Path]
Passphrase = Union[bytes, str, None]

HandleT = TypeVar("HandleT")

_CERTIFICATE_MARKER = b"-----BEGIN CERTIFICATE-----"


class SecretKey:
    """Mutable copy of a shared secret that can be zeroed in place."""

    __slots__ = ("_buffer",)

    def __init__(self, material: bytes | bytearray | str) -> None:
        if isinstance(material, str):
            material = material.encode("utf-8")
        if not isinstance(material, (bytes, bytearray)):
            raise JwsError(
                JwsErrorCode.INVALID_KEY,
                "Secret key must be bytes or str",
                details={"type": type(material).__name__},
            )
        if not material:
            raise JwsError(JwsErrorCode.INVALID_KEY, "Secret key can't be empty")
        self._buffer = bytearray(material)

    @property
    def material(self) -> bytearray:
        if not self._buffer:
            raise JwsError(JwsErrorCode.KEY_NOT_SET, "Secret key has been released")
        return self._buffer

    def wipe(self) -> None:
        for index in range(len(self._buffer)):
            self._buffer[index] = 0
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def __enter__(self) -> SecretKey:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return f"SecretKey(length={len(self._buffer)})"


class KeySlot(Generic[HandleT]):
    """Owns the handle for one key role (``secret``, ``private`` or ``public``).

    The slot moves from unset to set only through :meth:`replace`; the previous
    handle is released after the new one is stored.
    """

    def __init__(self, role: str, *, release: Optional[Callable[[HandleT], None]] = None) -> None:
        self.role = role
        self._handle: Optional[HandleT] = None
        self._release = release

    @property
    def is_set(self) -> bool:
        return self._handle is not None

    def replace(self, handle: HandleT) -> None:
        previous, self._handle = self._handle, handle
        if previous is not None and previous is not handle:
            self._dispose(previous)

    def require(self) -> HandleT:
        if self._handle is None:
            raise JwsError(
                JwsErrorCode.KEY_NOT_SET,
                f"{self.role.capitalize()} key is not set",
                details={"role": self.role},
            )
        return self._handle

    def release(self) -> None:
        previous, self._handle = self._handle, None
        if previous is not None:
            self._dispose(previous)

    def _dispose(self, handle: HandleT) -> None:
        if self._release is not None:
            self._release(handle)

    def __repr__(self) -> str:
        state = "set" if self.is_set else "unset"
        return f"KeySlot(role={self.role!r}, state={state})"


def read_key_material(material: KeyMaterial) -> bytes:
    """Resolve raw PEM bytes from inline data, a path or a ``file://`` reference."""
    if isinstance(material, Path):
        return _read_file(material)
    if isinstance(material, str):
        if material.startswith(FILE_REFERENCE_PREFIX):
            return _read_file(Path(material[len(FILE_REFERENCE_PREFIX) :]))
        return material.encode("utf-8")
    if isinstance(material, (bytes, bytearray)):
        return bytes(material)
    raise JwsError(
        JwsErrorCode.INVALID_KEY,
        "Unsupported key material type",
        details={"type": type(material).__name__},
    )


def _read_file(path: Path) -> bytes:
    try:
        return path.expanduser().read_bytes()
    except OSError as exc:
        raise JwsError(
            JwsErrorCode.INVALID_KEY,
            f"Unable to read key file: {exc.strerror or exc}",
            details={"path": str(path)},
        ) from exc


def _coerce_passphrase(passphrase: Passphrase) -> Optional[bytes]:
    if passphrase is None:
        return None
    if not isinstance(passphrase, (bytes, bytearray, str)):
        raise JwsError(
            JwsErrorCode.INVALID_KEY,
            "Passphrase must be bytes or str",
            details={"role": "private", "type": type(passphrase).__name__},
        )
    if not passphrase:
        return None
    if isinstance(passphrase, str):
        return passphrase.encode("utf-8")
    return bytes(passphrase)


def load_private_key(material: KeyMaterial, passphrase: Passphrase = None) -> rsa.RSAPrivateKey:
    """Parse an RSA private key, optionally protected by ``passphrase``."""
    data = read_key_material(material)
    try:
        key = serialization.load_pem_private_key(data, password=_coerce_passphrase(passphrase))
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise JwsError(
            JwsErrorCode.INVALID_KEY, f"Unable to load private key: {exc}", details={"role": "private"}
        ) from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise JwsError(
            JwsErrorCode.INVALID_KEY,
            "Private key is not an RSA key",
            details={"role": "private", "type": type(key).__name__},
        )
    return key


def load_public_key(material: KeyMaterial) -> rsa.RSAPublicKey:
    """Parse an RSA public key from a PEM public key or X.509 certificate."""
    data = read_key_material(material)
    try:
        if _CERTIFICATE_MARKER in data:
            key = x509.load_pem_x509_certificate(data).public_key()
        else:
            key = serialization.load_pem_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise JwsError(
            JwsErrorCode.INVALID_KEY, f"Unable to load public key: {exc}", details={"role": "public"}
        ) from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise JwsError(
            JwsErrorCode.INVALID_KEY,
            "Public key is not an RSA key",
            details={"role": "public", "type": type(key).__name__},
        )
    return key


__all__ = [
    "KeyMaterial",
    "KeySlot",
    "Passphrase",
    "SecretKey",
    "load_private_key",
    "load_public_key",
    "read_key_material",
]
