"""RSASSA-PKCS1-v1_5 (RS256/RS384/RS512) backend."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .algorithms import RSA_ALGORITHMS, AlgorithmDescriptor
from .codec import SegmentCodec
from .engine import JwsEngine, PayloadMode
from .errors import JwsError, JwsErrorCode
from .keys import KeyMaterial, KeySlot, Passphrase, load_private_key, load_public_key
from .logging import get_logger

logger = get_logger(__name__)

_PROVIDER_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


class VerificationOutcome(str, Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    ERROR = "error"


@dataclass(frozen=True)
class VerificationResult:
    outcome: VerificationOutcome
    diagnostic: str | None = None
    error: BaseException | None = None


def provider_sign(
    descriptor: AlgorithmDescriptor, private_key: rsa.RSAPrivateKey, message: bytes
) -> bytes:
    """Sign ``message``; provider faults surface as ``CRYPTO_PROVIDER``."""
    try:
        return private_key.sign(message, padding.PKCS1v15(), descriptor.hash_algorithm())
    except _PROVIDER_ERRORS as exc:
        raise JwsError(
            JwsErrorCode.CRYPTO_PROVIDER,
            str(exc) or type(exc).__name__,
            details={"operation": "sign", "alg": descriptor.name},
        ) from exc


def provider_verify(
    descriptor: AlgorithmDescriptor,
    public_key: rsa.RSAPublicKey,
    message: bytes,
    signature: bytes,
) -> VerificationResult:
    try:
        public_key.verify(signature, message, padding.PKCS1v15(), descriptor.hash_algorithm())
    except InvalidSignature:
        return VerificationResult(VerificationOutcome.MISMATCH)
    except _PROVIDER_ERRORS as exc:
        return VerificationResult(
            VerificationOutcome.ERROR, diagnostic=str(exc) or type(exc).__name__, error=exc
        )
    return VerificationResult(VerificationOutcome.MATCH)


class RsaJws(JwsEngine):
    """Signs with an RSA private key and verifies with an RSA public key.

    Either key is optional; signing needs the private key and verification
    the public one. Payloads default to raw bytes.
    """

    def __init__(
        self,
        private_key: Optional[KeyMaterial] = None,
        public_key: Optional[KeyMaterial] = None,
        *,
        passphrase: Passphrase = None,
        payload_mode: PayloadMode | str = PayloadMode.RAW,
        codec: SegmentCodec | None = None,
    ) -> None:
        super().__init__(RSA_ALGORITHMS, payload_mode=payload_mode, codec=codec)
        self._private: KeySlot[rsa.RSAPrivateKey] = KeySlot("private")
        self._public: KeySlot[rsa.RSAPublicKey] = KeySlot("public")
        try:
            if private_key is not None:
                self._private.replace(load_private_key(private_key, passphrase))
            if public_key is not None:
                self._public.replace(load_public_key(public_key))
        except JwsError:
            self._release_keys()
            raise

    @property
    def has_private_key(self) -> bool:
        return self._private.is_set

    @property
    def has_public_key(self) -> bool:
        return self._public.is_set

    def set_private_key(self, key: KeyMaterial, passphrase: Passphrase = None) -> bool:
        """Load a private key; on failure the current key stays in place."""
        try:
            handle = load_private_key(key, passphrase)
        except JwsError as exc:
            logger.warning("jws.key.rejected", role="private", reason=exc.message)
            return False
        self._private.replace(handle)
        return True

    def set_public_key(self, key: KeyMaterial) -> bool:
        """Load a public key or certificate; on failure the current key stays in place."""
        try:
            handle = load_public_key(key)
        except JwsError as exc:
            logger.warning("jws.key.rejected", role="public", reason=exc.message)
            return False
        self._public.replace(handle)
        return True

    def _create_signature(self, descriptor: AlgorithmDescriptor, signing_input: bytes) -> bytes:
        return provider_sign(descriptor, self._private.require(), signing_input)

    def _verify_signature(
        self, descriptor: AlgorithmDescriptor, signing_input: bytes, signature: bytes
    ) -> bool:
        result = provider_verify(descriptor, self._public.require(), signing_input, signature)
        if result.outcome is VerificationOutcome.ERROR:
            raise JwsError(
                JwsErrorCode.CRYPTO_PROVIDER,
                result.diagnostic or "Signature verification failed",
                details={"operation": "verify", "alg": descriptor.name},
            ) from result.error
        return result.outcome is VerificationOutcome.MATCH

    def _release_keys(self) -> None:
        self._private.release()
        self._public.release()

    def __repr__(self) -> str:
        return (
            f"RsaJws(payload_mode={self.payload_mode.value!r}, "
            f"private={self._private!r}, public={self._public!r})"
        )


__all__ = [
    "RsaJws",
    "VerificationOutcome",
    "VerificationResult",
    "provider_sign",
    "provider_verify",
]
