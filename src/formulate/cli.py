"""Command-line interface for formulate."""

import argparse
import json
import sys
from datetime import date, datetime
from typing import Any

from formulate import __version__, normalize
from formulate.exceptions import FormulateError, NormalizationError
from formulate.types import UNDEFINED, Validator
from formulate.validators import (
    create_email_validator,
    create_password_validator,
    create_phone_validator,
    create_username_validator,
)

VALIDATOR_FACTORIES = {
    "email": create_email_validator,
    "password": create_password_validator,
    "phone": create_phone_validator,
    "username": create_username_validator,
}


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="formulate",
        description="Normalize key=value pairs into typed values",
    )
    parser.add_argument("pairs", nargs="*", metavar="key=value", help="Raw input pairs")
    parser.add_argument("--allow", help="Comma-separated keys to keep")
    parser.add_argument("--deny", help="Comma-separated keys to drop")
    parser.add_argument(
        "--mode",
        choices=["none", "collect", "strict"],
        default="none",
        help="Validation mode (default: none)",
    )
    parser.add_argument(
        "--empty-as",
        choices=["null", "undefined", "keep"],
        default="null",
        help="How to treat empty values (default: null)",
    )
    parser.add_argument(
        "--validate",
        action="append",
        default=[],
        metavar="KEY=KIND",
        help=f"Validate a field with a built-in validator ({', '.join(sorted(VALIDATOR_FACTORIES))})",
    )
    parser.add_argument("--lang", default="en", help="Message language (default: en)")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"formulate {__version__}",
    )

    args = parser.parse_args(argv)

    try:
        data = _parse_pairs(args.pairs)
        outcome = normalize(
            data,
            allowlist=_split_keys(args.allow),
            denylist=_split_keys(args.deny),
            validation_mode=args.mode,
            empty_string_as=args.empty_as,
            remove_undefined_fields=args.empty_as == "undefined",
            validators=_build_validators(args.validate),
            language=args.lang,
        )
    except NormalizationError as e:
        print(f"Error: {e.field}: {e.message}", file=sys.stderr)
        return 1
    except FormulateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(outcome.result, indent=2, ensure_ascii=False, default=_json_default))
    else:
        _print_formatted(outcome.result)

    if outcome.errors:
        for key, message in outcome.errors.items():
            print(f"  {key}: {message}", file=sys.stderr)
        return 2

    return 0


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    data: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        data[key] = value
    return data


def _build_validators(options: list[str]) -> dict[str, Validator]:
    validators: dict[str, Validator] = {}
    for option in options:
        key, _, kind = option.partition("=")
        factory = VALIDATOR_FACTORIES.get(kind.strip().lower())
        if not key or factory is None:
            raise ValueError(f"Expected KEY=KIND with KIND in {sorted(VALIDATOR_FACTORIES)}, got {option!r}")
        validators[key] = factory()
    return validators


def _split_keys(value: str | None) -> list[str] | None:
    """Split a comma-separated option into keys."""
    if value is None:
        return None
    return [key.strip() for key in value.split(",") if key.strip()]


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if value is UNDEFINED:
        return None
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _print_formatted(result: dict[str, Any]) -> None:
    """Print result in human-readable format."""
    print()
    for key, value in result.items():
        print(f"  {key + ':':<14} {_format_value(value)}")
    print()


def _format_value(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=_json_default)
    return repr(value) if isinstance(value, str) else str(value)


if __name__ == "__main__":
    sys.exit(main())
