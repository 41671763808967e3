"""Error types for JWS signing and verification."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class JwsErrorCode(IntEnum):
    FORMAT = 1
    PARSE = 2
    INVALID_HEADER = 3
    UNKNOWN_ALGORITHM = 4
    EMPTY_PAYLOAD = 5
    INVALID_KEY = 10
    KEY_NOT_SET = 40
    CRYPTO_PROVIDER = 49

    @property
    def label(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class JwsError(RuntimeError):
    """Base error for JWS failures.

    A signature mismatch is never reported through this type; ``verify``
    returns ``False`` instead. The underlying exception, when there is one,
    is chained as ``__cause__``.
    """

    def __init__(
        self, code: JwsErrorCode, message: str, *, details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def __str__(self) -> str:
        base = f"{self.code.label}[{int(self.code)}]: {self.message}"
        if self.details:
            return f"{base} ({self.details})"
        return base


__all__ = ["JwsError", "JwsErrorCode"]
