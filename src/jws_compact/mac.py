"""HMAC (HS256/HS384/HS512) backend."""

from __future__ import annotations

import hmac

from .algorithms import MAC_ALGORITHMS, AlgorithmDescriptor
from .codec import SegmentCodec
from .engine import JwsEngine, PayloadMode
from .errors import JwsError, JwsErrorCode
from .keys import KeySlot, SecretKey
from .logging import get_logger

logger = get_logger(__name__)


class MacJws(JwsEngine):
    """Signs and verifies compact JWS with a shared secret.

    Payloads default to JSON mappings. The secret is kept in a
    :class:`~jws_compact.keys.SecretKey` and zeroed when replaced or when the
    instance is closed.
    """

    def __init__(
        self,
        secret_key: bytes | bytearray | str,
        *,
        payload_mode: PayloadMode | str = PayloadMode.JSON,
        codec: SegmentCodec | None = None,
    ) -> None:
        super().__init__(MAC_ALGORITHMS, payload_mode=payload_mode, codec=codec)
        self._secret: KeySlot[SecretKey] = KeySlot("secret", release=SecretKey.wipe)
        if not secret_key:
            raise JwsError(JwsErrorCode.INVALID_KEY, "Secret key can't be empty")
        self._secret.replace(SecretKey(secret_key))

    @property
    def has_secret_key(self) -> bool:
        return self._secret.is_set

    def set_secret_key(self, key: bytes | bytearray | str) -> bool:
        """Replace the secret; an unusable key is refused and the current one kept."""
        if not key:
            logger.warning("jws.key.rejected", role="secret", reason="empty")
            return False
        try:
            secret = SecretKey(key)
        except JwsError as exc:
            logger.warning("jws.key.rejected", role="secret", reason=exc.message)
            return False
        self._secret.replace(secret)
        return True

    def _digest(self, descriptor: AlgorithmDescriptor, signing_input: bytes) -> bytes:
        secret = self._secret.require()
        return hmac.new(secret.material, signing_input, descriptor.hashlib_digest()).digest()

    def _create_signature(self, descriptor: AlgorithmDescriptor, signing_input: bytes) -> bytes:
        return self._digest(descriptor, signing_input)

    def _verify_signature(
        self, descriptor: AlgorithmDescriptor, signing_input: bytes, signature: bytes
    ) -> bool:
        expected = self._digest(descriptor, signing_input)
        return hmac.compare_digest(expected, signature)

    def _release_keys(self) -> None:
        self._secret.release()

    def __repr__(self) -> str:
        return f"MacJws(payload_mode={self.payload_mode.value!r}, secret={self._secret!r})"


__all__ = ["MacJws"]
