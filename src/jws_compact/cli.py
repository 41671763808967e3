"""Command-line interface for signing, verifying and inspecting compact JWS."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from .config import ConfigError, JwsSettings, load_settings
from .engine import PayloadMode
from .errors import JwsError
from .factory import Backend, build_backend, default_header
from .logging import bind_context, clear_context, get_logger, setup_logging

logger = get_logger(__name__)


def _read_argument(value: str) -> str:
    if value == "-":
        return sys.stdin.read().strip()
    return value


def _load_backend(args: argparse.Namespace) -> tuple[JwsSettings, Backend]:
    settings = load_settings().with_overrides(
        backend=args.backend,
        secret_key=args.secret_key,
        private_key=args.private_key,
        private_key_passphrase=args.passphrase,
        public_key=args.public_key,
        base64_variant=args.base64_variant,
        log_level=args.log_level,
    )
    setup_logging(settings.log_level)
    return settings, build_backend(settings)


def _parse_json_object(text: str, *, what: str) -> dict[str, Any]:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{what} must be valid JSON: {exc.msg}") from exc
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a JSON object")
    return value


def _dump(value: Any, pretty: bool) -> None:
    indent = 2 if pretty else None
    json.dump(value, sys.stdout, indent=indent, ensure_ascii=False)
    sys.stdout.write("\n")


def _cmd_sign(args: argparse.Namespace) -> int:
    settings, backend = _load_backend(args)
    with backend:
        header = default_header(settings)
        if args.header:
            header.update(_parse_json_object(args.header, what="--header"))
        if args.alg:
            header["alg"] = args.alg

        text = _read_argument(args.payload)
        payload: Any
        if backend.payload_mode is PayloadMode.JSON:
            payload = _parse_json_object(text, what="Payload")
        else:
            payload = text.encode("utf-8")
        print(backend.sign(payload, header))
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    _, backend = _load_backend(args)
    with backend:
        valid = backend.verify(_read_argument(args.token))
    print("valid" if valid else "invalid")
    return 0 if valid else 1


def _cmd_header(args: argparse.Namespace) -> int:
    _, backend = _load_backend(args)
    with backend:
        _dump(backend.get_header(_read_argument(args.token)), args.pretty)
    return 0


def _cmd_payload(args: argparse.Namespace) -> int:
    _, backend = _load_backend(args)
    with backend:
        payload = backend.get_payload(_read_argument(args.token))
    if isinstance(payload, bytes):
        sys.stdout.write(payload.decode("utf-8", errors="replace"))
        sys.stdout.write("\n")
    else:
        _dump(payload, args.pretty)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jws-compact", description="Sign, verify and inspect compact JWS tokens"
    )
    parser.add_argument("--backend", choices=["mac", "rsa"], help="Override JWS_BACKEND")
    parser.add_argument("--secret-key", help="Shared secret for the mac backend")
    parser.add_argument("--private-key", help="PEM private key path for the rsa backend")
    parser.add_argument("--passphrase", help="Passphrase for an encrypted private key")
    parser.add_argument("--public-key", help="PEM public key or certificate path")
    parser.add_argument(
        "--base64-variant", choices=["urlsafe", "standard"], help="Segment alphabet"
    )
    parser.add_argument("--log-level", help="Log level for diagnostics on stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sign_parser = subparsers.add_parser("sign", help="Sign a payload and print the token")
    sign_parser.add_argument("payload", help="Payload text, JSON in json mode; '-' reads stdin")
    sign_parser.add_argument("--header", help="Extra header fields as a JSON object")
    sign_parser.add_argument("--alg", help="Signature algorithm, e.g. HS512 or RS256")
    sign_parser.set_defaults(func=_cmd_sign)

    verify_parser = subparsers.add_parser("verify", help="Verify a token's signature")
    verify_parser.add_argument("token", help="Compact JWS; '-' reads stdin")
    verify_parser.set_defaults(func=_cmd_verify)

    for name, func, help_text in (
        ("header", _cmd_header, "Print the decoded header"),
        ("payload", _cmd_payload, "Print the decoded payload"),
    ):
        inspect_parser = subparsers.add_parser(name, help=help_text)
        inspect_parser.add_argument("token", help="Compact JWS; '-' reads stdin")
        inspect_parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
        inspect_parser.set_defaults(func=func)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    bind_context(command=args.command)
    try:
        return args.func(args)
    except JwsError as exc:
        logger.error("jws.cli.failed", code=int(exc.code), reason=exc.message)
        parser.error(str(exc))
    except (ConfigError, ValueError) as exc:
        parser.error(str(exc))
    finally:
        clear_context("command")
    return 1


if __name__ == "__main__":  # pragma: no cover - manual execution path
    raise SystemExit(main())
