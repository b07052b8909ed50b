# src/pkg_token/cli.py

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from typing import Any, Sequence

from .config.env import settings_from_env
from .domain.constants import TokenKind
from .domain.entities import Token
from .domain.exceptions import TokenError
from .integrations.common.token_factory import (
    TokenService,
    create_token_service_from_settings,
)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-token",
        description="Issue, verify and inspect signed expiring tokens "
                    "(secret read from PKG_TOKEN_SECRET)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    issue = commands.add_parser("issue", help="Issue and sign a fresh token.")
    issue.add_argument("subject", help="Subject the token is issued to.")
    issue.add_argument(
        "--kind",
        choices=[kind.value for kind in TokenKind],
        default=TokenKind.ACCESS.value,
        help="Token kind (TTL defaults differ per kind).",
    )
    issue.add_argument(
        "--ttl",
        type=int,
        help="Override the TTL in seconds "
             "(defaults from env PKG_TOKEN_ACCESS_TTL / PKG_TOKEN_REFRESH_TTL).",
    )
    issue.add_argument("--user-agent", help="Optional user agent claim.")

    verify = commands.add_parser("verify", help="Verify a signature (tag + expiry).")
    verify.add_argument("signature")
    verify.add_argument(
        "--kind",
        choices=[kind.value for kind in TokenKind],
        help="Reject tokens of any other kind (required for refresh tokens "
             "when PKG_TOKEN_REFRESH_SECRET is set).",
    )
    verify.add_argument(
        "--user-agent",
        help="Reject tokens issued to any other user agent.",
    )

    inspect = commands.add_parser(
        "inspect",
        help="Decode a signature WITHOUT verifying it.",
    )
    inspect.add_argument("signature")

    return parser.parse_args(args=argv)


def _token_to_dict(token: Token) -> dict[str, Any]:
    data = dataclasses.asdict(token)
    data["kind"] = token.kind.value
    return data


def _run(args: argparse.Namespace, tokens: TokenService) -> dict[str, Any]:
    if args.command == "issue":
        kind = TokenKind(args.kind)
        if args.ttl is None:
            signature = tokens.issue(args.subject, kind=kind, user_agent=args.user_agent)
        else:
            token = Token.issue(
                args.subject,
                kind=kind,
                ttl_seconds=args.ttl,
                user_agent=args.user_agent,
                clock=tokens.issue_use_case.clock,
            )
            signature = tokens.sign(token)
        return {"signature": signature, "token": _token_to_dict(tokens.inspect(signature))}

    if args.command == "verify":
        expected = TokenKind(args.kind) if args.kind else None
        token = tokens.verify(
            args.signature,
            expected_kind=expected,
            expected_user_agent=args.user_agent,
        )
        return {"token": _token_to_dict(token)}

    return {"verified": False, "token": _token_to_dict(tokens.inspect(args.signature))}


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        tokens = create_token_service_from_settings(settings_from_env())
        result = _run(args, tokens)
    except (TokenError, RuntimeError) as exc:
        json.dump({"ok": False, "error": type(exc).__name__, "detail": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 1

    json.dump({"ok": True, **result}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
