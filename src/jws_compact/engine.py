"""Shared compact-serialization protocol for every signing backend."""

from __future__ import annotations

import abc
from enum import Enum
from typing import Any, Mapping, Optional, Protocol, Union, runtime_checkable

from .algorithms import AlgorithmDescriptor, AlgorithmRegistry
from .codec import DEFAULT_CODEC, SegmentCodec
from .constants import SEGMENT_COUNT, SEGMENT_SEPARATOR
from .errors import JwsError, JwsErrorCode
from .logging import get_logger

logger = get_logger(__name__)

Payload = Union[Mapping[str, Any], bytes, str]
Header = Mapping[str, Any]


class PayloadMode(str, Enum):
    """How an instance treats payloads.

    ``JSON`` signs mappings and returns dicts from ``get_payload``; ``RAW``
    signs bytes (or UTF-8 text) and returns bytes.
    """

    JSON = "json"
    RAW = "raw"


@runtime_checkable
class CompactJws(Protocol):
    """Capability shared by every backend."""

    def sign(self, payload: Payload, header: Optional[Header] = None) -> str: ...

    def verify(self, token: str) -> bool: ...

    def get_header(self, token: str) -> dict[str, Any]: ...

    def get_payload(self, token: str) -> Union[dict[str, Any], bytes]: ...


class JwsEngine(abc.ABC):
    """Header normalization, segment handling and the public contract.

    Subclasses only provide the signature step and own their key material.
    """

    def __init__(
        self,
        registry: AlgorithmRegistry,
        *,
        payload_mode: PayloadMode | str,
        codec: SegmentCodec | None = None,
    ) -> None:
        self.registry = registry
        self.payload_mode = PayloadMode(payload_mode)
        self.codec = codec or DEFAULT_CODEC

    # Public contract ---------------------------------------------------
    def sign(self, payload: Payload, header: Optional[Header] = None) -> str:
        """Create a compact JWS for ``payload`` and sign it."""
        if not payload:
            raise JwsError(JwsErrorCode.EMPTY_PAYLOAD, "Payload can't be empty")
        payload_bytes = self._payload_to_bytes(payload)
        normalized, descriptor = self._normalize_header(header)

        encoded_header = self.codec.encode_segment(self.codec.encode_json(normalized))
        encoded_payload = self.codec.encode_segment(payload_bytes)
        signing_input = _signing_input(encoded_header, encoded_payload)

        signature = self._create_signature(descriptor, signing_input)
        logger.debug("jws.signed", alg=descriptor.name)
        return SEGMENT_SEPARATOR.join(
            (encoded_header, encoded_payload, self.codec.encode_segment(signature))
        )

    def verify(self, token: str) -> bool:
        """Return ``True`` when the token's signature matches, ``False`` otherwise."""
        encoded_header, encoded_payload, encoded_signature = self._split(token)
        descriptor = self._verification_algorithm(encoded_header)
        signature = self.codec.decode_segment(encoded_signature)

        valid = self._verify_signature(
            descriptor, _signing_input(encoded_header, encoded_payload), signature
        )
        if valid:
            logger.debug("jws.verified", alg=descriptor.name, valid=True)
        else:
            logger.info("jws.verify.mismatch", alg=descriptor.name)
        return valid

    def get_header(self, token: str) -> dict[str, Any]:
        encoded_header, _, _ = self._split(token)
        return self.codec.decode_json(self.codec.decode_segment(encoded_header))

    def get_payload(self, token: str) -> Union[dict[str, Any], bytes]:
        _, encoded_payload, _ = self._split(token)
        raw = self.codec.decode_segment(encoded_payload)
        if self.payload_mode is PayloadMode.JSON:
            return self.codec.decode_json(raw)
        return raw

    # Resource lifecycle ------------------------------------------------
    def close(self) -> None:
        """Release every key handle held by this instance."""
        self._release_keys()

    def __enter__(self) -> JwsEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Backend hooks -----------------------------------------------------
    @abc.abstractmethod
    def _create_signature(self, descriptor: AlgorithmDescriptor, signing_input: bytes) -> bytes:
        """Sign ``encodedHeader.encodedPayload`` with the resolved algorithm."""

    @abc.abstractmethod
    def _verify_signature(
        self, descriptor: AlgorithmDescriptor, signing_input: bytes, signature: bytes
    ) -> bool:
        """Check ``signature`` against ``signing_input``; mismatch returns ``False``."""

    @abc.abstractmethod
    def _release_keys(self) -> None:
        """Drop and scrub all key material."""

    # Helpers -----------------------------------------------------------
    def _payload_to_bytes(self, payload: Payload) -> bytes:
        if self.payload_mode is PayloadMode.JSON:
            if not isinstance(payload, Mapping):
                raise TypeError(
                    f"JSON payload mode expects a mapping, got {type(payload).__name__}"
                )
            return self.codec.encode_json(payload)
        if isinstance(payload, str):
            return payload.encode("utf-8")
        if isinstance(payload, (bytes, bytearray)):
            return bytes(payload)
        raise TypeError(f"Raw payload mode expects bytes or str, got {type(payload).__name__}")

    def _normalize_header(
        self, header: Optional[Header]
    ) -> tuple[dict[str, Any], AlgorithmDescriptor]:
        if header is None:
            header = {}
        if not isinstance(header, Mapping):
            raise JwsError(
                JwsErrorCode.INVALID_HEADER,
                "Header must be a mapping",
                details={"type": type(header).__name__},
            )
        normalized = {key: value for key, value in header.items() if value}
        descriptor = self.registry.resolve(normalized.get("alg", self.registry.default.name))
        normalized["alg"] = descriptor.name
        return normalized, descriptor

    def _verification_algorithm(self, encoded_header: str) -> AlgorithmDescriptor:
        raw = self.codec.decode_segment(encoded_header)
        try:
            header = self.codec.decode_json(raw)
        except JwsError as exc:
            raise JwsError(JwsErrorCode.INVALID_HEADER, "JWS header is not a JSON object") from exc
        algorithm = header.get("alg")
        if not self.registry.is_supported(algorithm):
            raise JwsError(
                JwsErrorCode.INVALID_HEADER,
                "JWS header lacks a supported 'alg'",
                details={"alg": algorithm, "supported": ", ".join(self.registry.names)},
            )
        return self.registry.resolve(algorithm)

    @staticmethod
    def _split(token: str) -> tuple[str, str, str]:
        if not token or not isinstance(token, str):
            raise JwsError(JwsErrorCode.FORMAT, "JWS can't be empty")
        segments = token.split(SEGMENT_SEPARATOR)
        if len(segments) != SEGMENT_COUNT or not all(segments):
            raise JwsError(
                JwsErrorCode.FORMAT,
                f"JWS must consist of exactly {SEGMENT_COUNT} non-empty segments",
                details={"segments": len(segments)},
            )
        header, payload, signature = segments
        return header, payload, signature


def _signing_input(encoded_header: str, encoded_payload: str) -> bytes:
    return f"{encoded_header}{SEGMENT_SEPARATOR}{encoded_payload}".encode("ascii")


__all__ = ["CompactJws", "Header", "JwsEngine", "Payload", "PayloadMode"]
