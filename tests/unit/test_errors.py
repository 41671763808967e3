"""Tests for the JWS error type."""

from __future__ import annotations

from jws_compact.errors import JwsError, JwsErrorCode


def test_error_codes_are_stable() -> None:
    assert int(JwsErrorCode.FORMAT) == 1
    assert int(JwsErrorCode.PARSE) == 2
    assert int(JwsErrorCode.INVALID_KEY) == 10
    assert int(JwsErrorCode.KEY_NOT_SET) == 40
    assert int(JwsErrorCode.CRYPTO_PROVIDER) == 49


def test_string_representation() -> None:
    error = JwsError(JwsErrorCode.KEY_NOT_SET, "Private key is not set", details={"role": "private"})

    assert error.message == "Private key is not set"
    assert str(error) == "KeyNotSet[40]: Private key is not set ({'role': 'private'})"
    assert str(JwsError(JwsErrorCode.FORMAT, "JWS can't be empty")) == "Format[1]: JWS can't be empty"


def test_cause_chain_is_preserved() -> None:
    try:
        try:
            raise ValueError("bad decrypt")
        except ValueError as exc:
            raise JwsError(JwsErrorCode.INVALID_KEY, "Unable to load private key") from exc
    except JwsError as error:
        assert isinstance(error.__cause__, ValueError)
        assert isinstance(error, RuntimeError)
