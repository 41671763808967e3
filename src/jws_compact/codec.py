"""Segment and JSON transforms for compact serialization."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .errors import JwsError, JwsErrorCode


class Base64Variant(str, Enum):
    URLSAFE = "urlsafe"
    STANDARD = "standard"


@dataclass(frozen=True)
class SegmentCodec:
    """Turns header and payload data into wire segments and back.

    ``URLSAFE`` emits unpadded base64url as RFC 7515 requires and accepts
    segments with or without padding. ``STANDARD`` emits padded standard
    base64, which is what older tokens used.
    """

    variant: Base64Variant = Base64Variant.URLSAFE

    def encode_segment(self, data: bytes) -> str:
        if self.variant is Base64Variant.STANDARD:
            return base64.b64encode(data).decode("ascii")
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

    def decode_segment(self, segment: str) -> bytes:
        try:
            raw = segment.encode("ascii")
        except UnicodeEncodeError as exc:
            raise JwsError(JwsErrorCode.FORMAT, "Segment contains non-ASCII characters") from exc

        try:
            if self.variant is Base64Variant.STANDARD:
                return base64.b64decode(raw, validate=True)
            if b"+" in raw or b"/" in raw:
                raise binascii.Error("characters outside the base64url alphabet")
            raw = raw.rstrip(b"=")
            padding = b"=" * (-len(raw) % 4)
            return base64.b64decode(raw + padding, altchars=b"-_", validate=True)
        except (binascii.Error, ValueError) as exc:
            raise JwsError(
                JwsErrorCode.FORMAT,
                "Segment is not valid base64",
                details={"variant": self.variant.value},
            ) from exc

    @staticmethod
    def encode_json(data: Mapping[str, Any]) -> bytes:
        return json.dumps(dict(data), separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    @staticmethod
    def decode_json(data: bytes) -> dict[str, Any]:
        try:
            decoded = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise JwsError(JwsErrorCode.PARSE, "Segment is not valid JSON") from exc
        if not isinstance(decoded, dict):
            raise JwsError(
                JwsErrorCode.PARSE,
                "Segment does not contain a JSON object",
                details={"type": type(decoded).__name__},
            )
        return decoded


DEFAULT_CODEC = SegmentCodec()

__all__ = ["Base64Variant", "DEFAULT_CODEC", "SegmentCodec"]
