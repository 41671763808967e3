"""Construct configured JWS backends."""

from __future__ import annotations

from typing import Any, Union

from .algorithms import AlgorithmFamily
from .codec import SegmentCodec
from .config import ConfigError, JwsSettings
from .constants import FILE_REFERENCE_PREFIX
from .engine import PayloadMode
from .mac import MacJws
from .rsa import RsaJws

Backend = Union[MacJws, RsaJws]


def build_backend(settings: JwsSettings) -> Backend:
    """Return the backend described by ``settings`` with its keys loaded.

    Key loading failures propagate as ``JwsError(INVALID_KEY)``.
    """
    codec = SegmentCodec(settings.base64_variant)
    if settings.backend is AlgorithmFamily.MAC:
        if settings.secret_key is None:
            raise ConfigError("JWS_SECRET_KEY is required for the mac backend")
        return MacJws(
            settings.secret_key.get_secret_value(),
            payload_mode=settings.payload_mode or PayloadMode.JSON,
            codec=codec,
        )

    passphrase = (
        settings.private_key_passphrase.get_secret_value()
        if settings.private_key_passphrase is not None
        else None
    )
    return RsaJws(
        _as_reference(settings.private_key),
        _as_reference(settings.public_key),
        passphrase=passphrase,
        payload_mode=settings.payload_mode or PayloadMode.RAW,
        codec=codec,
    )


def default_header(settings: JwsSettings) -> dict[str, Any]:
    if settings.algorithm:
        return {"alg": settings.algorithm}
    return {}


def _as_reference(path: str | None) -> str | None:
    if not path:
        return None
    if path.startswith(FILE_REFERENCE_PREFIX):
        return path
    return f"{FILE_REFERENCE_PREFIX}{path}"


__all__ = ["Backend", "build_backend", "default_header"]
