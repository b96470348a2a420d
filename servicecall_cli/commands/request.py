"""
CLI Request Command

Execute one call through HttpClient and print the response snapshot.

Usage:
    servicecall request METHOD URL [--data JSON] [--header K:V]... [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from typing import Any

from servicecall import (
    FormBodyHandler,
    HttpClient,
    HttpResponse,
    MockRegistry,
    ReceiptRecorder,
)
from servicecall.config import ClientConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_RESPONSE_ERROR = 2


def parse_headers(values: list[str] | None) -> dict[str, str]:
    """Parse repeated 'Name: value' arguments."""
    headers: dict[str, str] = {}
    for value in values or []:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"Invalid header '{value}', expected 'Name: value'")
        headers[name.strip()] = content.strip()
    return headers


def parse_body(data: str | None) -> Any:
    """Parse --data as JSON, falling back to the raw string."""
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        return data


def build_client(args: Namespace, config: ClientConfig) -> HttpClient:
    """Create a client from config and command-line overrides."""
    kwargs: dict[str, Any] = {}
    if args.replay:
        kwargs["mocks"] = MockRegistry.from_receipts(ReceiptRecorder.load(args.replay))
    else:
        kwargs["mocks"] = MockRegistry()
    if args.record:
        kwargs["recorder"] = ReceiptRecorder()
    if args.form:
        kwargs["request_body_handler"] = FormBodyHandler()

    client = HttpClient.from_config(config, **kwargs)
    if args.base_url is not None:
        client.set_base_url(args.base_url)
    if args.service:
        client.set_service_name(args.service)
    if args.header:
        client.push_header(parse_headers(args.header))
    if args.form:
        client.push_header({"content-type": FormBodyHandler.content_type})
    return client


def print_response_human(response: HttpResponse) -> None:
    """Print a response for humans."""
    print(f"{response.method} {response.url}")
    print(f"status: {response.status if response.status is not None else '-'}")
    print(f"time: {response.time.total:.3f}s")
    if response.error is not None:
        print(f"error: {response.error.kind}: {response.error.message}")
    for name, value in response.headers.items():
        print(f"{name}: {value}")
    if response.body:
        print()
        print(response.body)


def request_cmd(args: Namespace) -> int:
    """Handle request command."""
    config: ClientConfig = args.client_config
    client = build_client(args, config)

    response = client.request(
        args.method.upper(),
        args.url,
        parse_body(args.data),
    )

    if args.json:
        print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_response_human(response)

    if args.record and client.recorder is not None:
        path = client.recorder.save(args.record)
        logger.info(f"Saved {len(client.recorder.get_receipts())} receipt(s) to {path}")

    if response.error is not None:
        print(f"Response error: {response.error.message}", file=sys.stderr)
        return EXIT_RESPONSE_ERROR
    return EXIT_SUCCESS
