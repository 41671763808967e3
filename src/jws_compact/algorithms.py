"""Signature algorithm tables (RFC 7518, sections 3.2 and 3.3)."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterable

from cryptography.hazmat.primitives import hashes

from .constants import DEFAULT_MAC_ALGORITHM, DEFAULT_RSA_ALGORITHM
from .errors import JwsError, JwsErrorCode


class AlgorithmFamily(str, Enum):
    MAC = "mac"
    RSA = "rsa"


_CRYPTOGRAPHY_HASHES: dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


@dataclass(frozen=True)
class AlgorithmDescriptor:
    """Pairs a public ``alg`` name with the digest that backs it."""

    name: str
    digest: str
    family: AlgorithmFamily

    def hashlib_digest(self) -> Callable[..., Any]:
        return getattr(hashlib, self.digest)

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        return _CRYPTOGRAPHY_HASHES[self.digest]()


class AlgorithmRegistry:
    """Read-only, case-insensitive lookup of supported algorithms."""

    def __init__(self, descriptors: Iterable[AlgorithmDescriptor], default: str) -> None:
        table = {descriptor.name.upper(): descriptor for descriptor in descriptors}
        if default.upper() not in table:
            raise ValueError(f"Default algorithm '{default}' is not part of the registry")
        self._table = MappingProxyType(table)
        self._default = table[default.upper()]

    @property
    def default(self) -> AlgorithmDescriptor:
        return self._default

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._table)

    def is_supported(self, name: object) -> bool:
        return isinstance(name, str) and name.isascii() and name.upper() in self._table

    def resolve(self, name: object) -> AlgorithmDescriptor:
        if not self.is_supported(name):
            raise JwsError(
                JwsErrorCode.UNKNOWN_ALGORITHM,
                f"Unsupported signature algorithm '{name}'",
                details={"supported": ", ".join(self.names)},
            )
        return self._table[str(name).upper()]

    def __contains__(self, name: object) -> bool:
        return self.is_supported(name)

    def __repr__(self) -> str:
        return f"AlgorithmRegistry(names={self.names!r}, default={self._default.name!r})"


MAC_ALGORITHMS = AlgorithmRegistry(
    [
        AlgorithmDescriptor("HS256", "sha256", AlgorithmFamily.MAC),
        AlgorithmDescriptor("HS384", "sha384", AlgorithmFamily.MAC),
        AlgorithmDescriptor("HS512", "sha512", AlgorithmFamily.MAC),
    ],
    default=DEFAULT_MAC_ALGORITHM,
)

# RSASSA-PKCS1-v1_5 for every entry.
RSA_ALGORITHMS = AlgorithmRegistry(
    [
        AlgorithmDescriptor("RS256", "sha256", AlgorithmFamily.RSA),
        AlgorithmDescriptor("RS384", "sha384", AlgorithmFamily.RSA),
        AlgorithmDescriptor("RS512", "sha512", AlgorithmFamily.RSA),
    ],
    default=DEFAULT_RSA_ALGORITHM,
)


def registry_for(family: AlgorithmFamily | str) -> AlgorithmRegistry:
    if AlgorithmFamily(family) is AlgorithmFamily.MAC:
        return MAC_ALGORITHMS
    return RSA_ALGORITHMS


__all__ = [
    "AlgorithmDescriptor",
    "AlgorithmFamily",
    "AlgorithmRegistry",
    "MAC_ALGORITHMS",
    "RSA_ALGORITHMS",
    "registry_for",
]
