"""JSON Web Signature compact serialization."""

from importlib import metadata

from .algorithms import MAC_ALGORITHMS, RSA_ALGORITHMS, AlgorithmDescriptor, AlgorithmRegistry
from .codec import Base64Variant, SegmentCodec
from .engine import CompactJws, JwsEngine, PayloadMode
from .errors import JwsError, JwsErrorCode
from .mac import MacJws
from .rsa import RsaJws

__all__ = [
    "AlgorithmDescriptor",
    "AlgorithmRegistry",
    "Base64Variant",
    "CompactJws",
    "JwsEngine",
    "JwsError",
    "JwsErrorCode",
    "MAC_ALGORITHMS",
    "MacJws",
    "PayloadMode",
    "RSA_ALGORITHMS",
    "RsaJws",
    "SegmentCodec",
    "__version__",
]


try:
    __version__ = metadata.version("jws-compact")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"
