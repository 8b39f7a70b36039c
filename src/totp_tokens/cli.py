"""Command-line interface for totp-tokens."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from totp_tokens import config
from totp_tokens.accounts import compute_all_tokens, load_accounts
from totp_tokens.base32 import DecodeError, decode_base32
from totp_tokens.hotp import Algorithm
from totp_tokens.otpauth import is_otpauth_uri, parse_otpauth_uri
from totp_tokens.totp import compute_token


ALGORITHM_CHOICES = [algorithm.value for algorithm in Algorithm]


def code_command(args: argparse.Namespace) -> int:
    """Handle the code command."""
    try:
        # Command-line options override the URI's parameters or the saved defaults
        if is_otpauth_uri(args.secret):
            defaults = parse_otpauth_uri(args.secret)
            secret = defaults.secret
        else:
            defaults = config.load_settings()
            secret = args.secret
        result = compute_token(
            secret,
            period=defaults.period if args.period is None else args.period,
            digits=defaults.digits if args.digits is None else args.digits,
            algorithm=args.algorithm or defaults.algorithm,
        )
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    if result.is_error:
        print("✗ Failed to generate token: invalid secret or parameters", file=sys.stderr)
        return 1

    print(f"{result.token} ({result.remaining_time}s remaining)")
    return 0


def validate_command(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    try:
        key = decode_base32(args.secret)
    except DecodeError as e:
        print(f"✗ Invalid secret: {e}", file=sys.stderr)
        return 1
    print(f"✓ Valid Base32 secret ({len(key)} bytes)")
    return 0


def batch_command(args: argparse.Namespace) -> int:
    """Handle the batch command."""
    try:
        accounts = load_accounts(args.accounts_file)
    except (FileNotFoundError, ValueError) as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    results = compute_all_tokens(accounts)

    if args.json:
        print(json.dumps([result.to_dict() for result in results], indent=2))
        return 0

    if not accounts:
        print("No accounts found.")
        return 0

    width = max(len(account.name) for account in accounts)
    for account, result in zip(accounts, results):
        if result.is_error:
            print(f"  {account.name:<{width}}  {result.token}")
        else:
            print(f"  {account.name:<{width}}  {result.token}  ({result.remaining_time}s)")
    return 0


def config_command(args: argparse.Namespace) -> int:
    """Handle the config command."""
    try:
        settings = config.load_settings()
        updates = {
            key: value
            for key, value in (
                ("period", args.period),
                ("digits", args.digits),
                ("algorithm", args.algorithm),
            )
            if value is not None
        }
        if updates:
            settings = config.Settings.from_dict({**settings.to_dict(), **updates})
            path = config.save_settings(settings)
            print(f"✓ Settings saved to {path}")
    except ValueError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"✗ Failed to save settings: {e}", file=sys.stderr)
        return 1

    print(f"  Period:    {settings.period}s")
    print(f"  Digits:    {settings.digits}")
    print(f"  Algorithm: {settings.algorithm.value}")
    return 0


def _add_parameter_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--period",
        "-p",
        type=int,
        default=None,
        help="Time step in seconds (default: from config, else 30)",
    )
    parser.add_argument(
        "--digits",
        "-d",
        type=int,
        default=None,
        help="Number of digits in the token (default: from config, else 6)",
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        type=str.upper,
        default=None,
        choices=ALGORITHM_CHOICES,
        help="HMAC hash algorithm (default: from config, else SHA1)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="totp-tokens",
        description="TOTP token generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Code command
    code_parser = subparsers.add_parser(
        "code",
        aliases=["gen"],
        help="Generate the current token for a secret or otpauth:// URI",
    )
    code_parser.add_argument(
        "secret",
        help="Base32 secret or otpauth:// key URI (options override URI parameters)",
    )
    _add_parameter_options(code_parser)

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate",
        aliases=["check"],
        help="Check that a secret is valid Base32",
    )
    validate_parser.add_argument("secret", help="Base32 secret")

    # Batch command
    batch_parser = subparsers.add_parser(
        "batch",
        aliases=["all"],
        help="Generate tokens for every account in a JSON file",
    )
    batch_parser.add_argument(
        "accounts_file",
        help='JSON array of {"name": ..., "secret": ...} objects',
    )
    batch_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )

    # Config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show or update default token parameters",
    )
    _add_parameter_options(config_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    if args.command in ("code", "gen"):
        return code_command(args)
    elif args.command in ("validate", "check"):
        return validate_command(args)
    elif args.command in ("batch", "all"):
        return batch_command(args)
    elif args.command == "config":
        return config_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
