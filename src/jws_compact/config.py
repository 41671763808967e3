"""Configuration for building JWS backends from the environment."""

from __future__ import annotations

import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from .algorithms import AlgorithmFamily, registry_for
from .codec import Base64Variant
from .constants import ENV_PREFIX
from .engine import PayloadMode
from .logging import DEFAULT_LOG_LEVEL


class ConfigError(RuntimeError):
    """Raised when jws-compact configuration is invalid."""


class JwsSettings(BaseModel):
    """Validated settings loaded from ``JWS_*`` environment variables."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    backend: AlgorithmFamily = Field(
        default=AlgorithmFamily.MAC, description="Signing backend (mac or rsa)"
    )
    algorithm: Optional[str] = Field(
        default=None, description="Default 'alg' for signing; backend default when unset"
    )
    base64_variant: Base64Variant = Field(
        default=Base64Variant.URLSAFE, description="Segment alphabet (urlsafe or standard)"
    )
    payload_mode: Optional[PayloadMode] = Field(
        default=None, description="Payload handling (json or raw); backend default when unset"
    )
    secret_key: Optional[SecretStr] = Field(default=None, description="Shared secret for HS*")
    private_key: Optional[str] = Field(
        default=None, description="Path or file:// reference to a PEM RSA private key"
    )
    private_key_passphrase: Optional[SecretStr] = Field(
        default=None, description="Passphrase for an encrypted private key"
    )
    public_key: Optional[str] = Field(
        default=None, description="Path or file:// reference to a PEM public key or certificate"
    )
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="Root log level")

    @field_validator("backend", "base64_variant", "payload_mode", mode="before")
    @classmethod
    def _normalise_choice(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @field_validator("algorithm")
    @classmethod
    def _validate_algorithm(cls, value: Optional[str], info) -> Optional[str]:
        if not value:
            return None
        backend = (info.data or {}).get("backend", AlgorithmFamily.MAC)
        registry = registry_for(backend)
        if not registry.is_supported(value):
            raise ValueError(
                f"Algorithm '{value}' is not supported by the {AlgorithmFamily(backend).value} "
                f"backend (expected one of {', '.join(registry.names)})"
            )
        return value.upper()

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        from logging import getLevelName

        candidate = value.upper()
        resolved = getLevelName(candidate)
        if isinstance(resolved, int):
            return candidate
        raise ValueError(f"Unsupported log level '{value}'")

    @classmethod
    def from_env(cls) -> JwsSettings:
        """Load settings from environment variables (respecting .env)."""
        load_dotenv()
        raw: dict[str, Any] = {
            "backend": _env("BACKEND", cls.model_fields["backend"].default),
            "algorithm": _env("ALGORITHM"),
            "base64_variant": _env("BASE64_VARIANT", cls.model_fields["base64_variant"].default),
            "payload_mode": _env("PAYLOAD_MODE"),
            "secret_key": _env("SECRET_KEY"),
            "private_key": _env("PRIVATE_KEY"),
            "private_key_passphrase": _env("PRIVATE_KEY_PASSPHRASE"),
            "public_key": _env("PUBLIC_KEY"),
            "log_level": _env("LOG_LEVEL", cls.model_fields["log_level"].default),
        }
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid jws-compact configuration: {exc}") from exc

    def with_overrides(self, **overrides: Any) -> JwsSettings:
        """Return a validated copy with non-``None`` overrides applied."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return type(self).model_validate(values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid jws-compact configuration: {exc}") from exc


def _env(name: str, default: Any = None) -> Any:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    if value is None or value == "":
        return default
    return value


def load_settings() -> JwsSettings:
    """Convenience helper to load settings with error propagation."""
    return JwsSettings.from_env()


__all__ = ["ConfigError", "JwsSettings", "load_settings"]
