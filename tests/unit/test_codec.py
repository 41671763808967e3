"""Tests for segment and JSON transforms."""

from __future__ import annotations

import pytest

from jws_compact.codec import Base64Variant, SegmentCodec
from jws_compact.errors import JwsError, JwsErrorCode


def test_urlsafe_segments_are_unpadded() -> None:
    codec = SegmentCodec()

    encoded = codec.encode_segment(b"\xfb\xff\xfe")

    assert encoded == "-__-"
    assert codec.encode_segment(b"ab") == "YWI"
    assert codec.decode_segment("YWI") == b"ab"


def test_urlsafe_decoding_accepts_padding() -> None:
    assert SegmentCodec().decode_segment("YWI=") == b"ab"


def test_urlsafe_rejects_standard_alphabet() -> None:
    with pytest.raises(JwsError) as exc_info:
        SegmentCodec().decode_segment("+//+")

    assert exc_info.value.code == JwsErrorCode.FORMAT


def test_standard_variant_matches_padded_base64() -> None:
    codec = SegmentCodec(Base64Variant.STANDARD)

    assert codec.encode_segment(b"\xfb\xff\xfe") == "+//+"
    assert codec.encode_segment(b"ab") == "YWI="
    assert codec.decode_segment("YWI=") == b"ab"


def test_standard_variant_rejects_missing_padding() -> None:
    with pytest.raises(JwsError) as exc_info:
        SegmentCodec(Base64Variant.STANDARD).decode_segment("YWI")

    assert exc_info.value.code == JwsErrorCode.FORMAT


@pytest.mark.parametrize("segment", ["@@@@", "a", "ab$c", "Zm9vé"])
def test_invalid_segments_raise_format_error(segment: str) -> None:
    with pytest.raises(JwsError) as exc_info:
        SegmentCodec().decode_segment(segment)

    assert exc_info.value.code == JwsErrorCode.FORMAT


def test_encode_json_is_compact_and_keeps_order() -> None:
    encoded = SegmentCodec.encode_json({"typ": "JWT", "alg": "HS256", "name": "Zoë"})

    assert encoded == '{"typ":"JWT","alg":"HS256","name":"Zoë"}'.encode("utf-8")


def test_decode_json_returns_mapping() -> None:
    assert SegmentCodec.decode_json(b'{"alg":"HS256"}') == {"alg": "HS256"}


@pytest.mark.parametrize("data", [b"not json", b"\xff\xfe", b"[1, 2]", b'"text"'])
def test_decode_json_rejects_non_objects(data: bytes) -> None:
    with pytest.raises(JwsError) as exc_info:
        SegmentCodec.decode_json(data)

    assert exc_info.value.code == JwsErrorCode.PARSE


def test_failure_chains_underlying_error() -> None:
    with pytest.raises(JwsError) as exc_info:
        SegmentCodec(Base64Variant.STANDARD).decode_segment("!!!!")

    assert exc_info.value.__cause__ is not None
