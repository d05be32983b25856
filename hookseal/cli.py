"""
Operator command line for hookseal.

    hookseal generate-secret [--bytes N]
    hookseal sign --secret S --payload P [--timestamp T]
"""

import argparse
import json
import sys
from typing import Optional, Sequence

from hookseal.core.security import build_headers, generate_secret


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookseal",
        description="Mint webhook secrets and sign payloads.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    secret_parser = subparsers.add_parser(
        "generate-secret",
        help="Print a new random shared secret",
    )
    secret_parser.add_argument(
        "--bytes",
        dest="length_bytes",
        type=_positive_int,
        default=32,
        help="Random bytes in the secret (default: 32)",
    )

    sign_parser = subparsers.add_parser(
        "sign",
        help="Print the signed headers for a payload",
    )
    sign_parser.add_argument("--secret", required=True, help="Shared webhook secret")
    sign_parser.add_argument("--payload", required=True, help="Serialized JSON payload, signed verbatim")
    sign_parser.add_argument("--timestamp", type=int, default=None, help="Epoch milliseconds (default: now)")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "generate-secret":
        print(generate_secret(args.length_bytes))
    elif args.command == "sign":
        headers = build_headers(args.payload, args.secret, timestamp=args.timestamp)
        print(json.dumps(headers, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
