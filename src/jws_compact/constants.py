"""Shared constants for jws-compact."""

ENV_PREFIX = "JWS_"

SEGMENT_SEPARATOR = "."
SEGMENT_COUNT = 3

DEFAULT_MAC_ALGORITHM = "HS256"
DEFAULT_RSA_ALGORITHM = "RS256"

FILE_REFERENCE_PREFIX = "file://"
