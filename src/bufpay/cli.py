"""
Command-line interface for exercising the BufPay APIs.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Sequence, Tuple

import requests

from .core.client import BufPayClient
from .core.config import BufPayConfig, ConfigError, load_bufpay_config
from .core.errors import GatewayError, ValidationError
from .core.payloads import PAY_TYPES


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    return {key: value for key, value in pairs}


def _read_payload(source: str) -> Any:
    if source == "-":
        text = sys.stdin.read()
    elif source.startswith("@"):
        text = Path(source[1:]).read_text(encoding="utf-8")
    else:
        text = source
    return json.loads(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bufpay",
        description="Create, query and verify BufPay payments",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing BUFPAY_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Create a payment")
    create.add_argument("--name", required=True, help="Product or service name")
    create.add_argument("--pay-type", required=True, choices=PAY_TYPES)
    create.add_argument("--price", required=True, help="Amount, e.g. 10.00")
    create.add_argument("--order-id", required=True, help="Your unique order id")
    create.add_argument("--order-uid", required=True, help="User id or email")
    create.add_argument("--notify-url", required=True, help="Webhook URL")
    create.add_argument("--return-url", default="", help="Redirect after payment")
    create.add_argument("--feedback-url", default="", help="Payment feedback URL")

    query = commands.add_parser("query", help="Query a payment by gateway order id")
    query.add_argument("aoid", help="BufPay order id")

    verify = commands.add_parser("verify", help="Check a notification signature")
    verify.add_argument(
        "payload",
        help="Notification JSON, @path to a JSON file, or - for stdin",
    )
    return parser


def _verify(args: argparse.Namespace, client: BufPayClient) -> int:
    try:
        payload = _read_payload(args.payload)
    except (OSError, json.JSONDecodeError) as exc:
        logging.error("Could not read notification payload: %s", exc)
        return 1
    if client.verify_notification(payload):
        logging.info("Notification signature is valid")
        return 0
    logging.error("Notification signature is invalid")
    return 1


def _call_gateway(args: argparse.Namespace, client: BufPayClient) -> int:
    try:
        if args.command == "create":
            result = client.create_payment(
                name=args.name,
                pay_type=args.pay_type,
                price=args.price,
                order_id=args.order_id,
                order_uid=args.order_uid,
                notify_url=args.notify_url,
                return_url=args.return_url,
                feedback_url=args.feedback_url,
            )
        else:
            result = client.query_payment(args.aoid)
    except ValidationError as exc:
        logging.error("Invalid input: %s", exc)
        return 1
    except GatewayError as exc:
        logging.error("Gateway request failed: %s", exc)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


def _run_command(args: argparse.Namespace, config: BufPayConfig) -> int:
    with requests.Session() as session:
        client = BufPayClient(config, session=session)
        if args.command == "verify":
            return _verify(args, client)
        return _call_gateway(args, client)


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_bufpay_config(env_file=args.env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    return _run_command(args, config)


def main(argv: Sequence[str] | None = None) -> int:
    return run_cli(argv)
