"""Test doubles and HTTP stubs shared across test modules."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import httpx

from domainfront.models.dns import DNSRecord, RecordType

WHMCS_URL = "https://billing.test/includes/api.php"
PAYSTACK_URL = "https://api.paystack.test"
DOH_URL = "https://dns.google/resolve"
PLATFORM_IP = "185.199.108.153"


class FakeResolver:
    """In-memory resolver. A value that is an Exception is raised on lookup."""

    def __init__(
        self, answers: dict[RecordType, list[DNSRecord] | Exception] | None = None
    ) -> None:
        self.answers = answers or {}
        self.calls: list[tuple[str, RecordType]] = []

    async def lookup(self, domain: str, record_type: RecordType) -> list[DNSRecord]:
        self.calls.append((domain, record_type))
        answer = self.answers.get(record_type, [])
        if isinstance(answer, Exception):
            raise answer
        return list(answer)


def ns_records(*hosts: str) -> list[DNSRecord]:
    return [DNSRecord(name="example.com.", value=host) for host in hosts]


def form_fields(request: httpx.Request) -> dict[str, str]:
    """Decode a form-encoded request body into single-valued fields."""
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


def whmcs_dispatch(
    responses: dict[str, dict[str, Any]],
    seen: list[dict[str, str]] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """respx side effect answering each WHMCS action from *responses*."""

    def _handler(request: httpx.Request) -> httpx.Response:
        fields = form_fields(request)
        if seen is not None:
            seen.append(fields)
        action = fields.get("action", "")
        if action not in responses:
            return httpx.Response(200, json={"result": "error", "message": f"No stub for {action}"})
        return httpx.Response(200, json=responses[action])

    return _handler


def doh_dispatch(
    answers: dict[str, list[dict[str, Any]]],
) -> Callable[[httpx.Request], httpx.Response]:
    """respx side effect answering DoH queries by record type."""

    def _handler(request: httpx.Request) -> httpx.Response:
        record_type = request.url.params.get("type", "")
        body: dict[str, Any] = {"Status": 0}
        if answers.get(record_type):
            body["Answer"] = answers[record_type]
        return httpx.Response(200, json=body)

    return _handler


def paystack_event(event: str, data: dict[str, Any]) -> bytes:
    return json.dumps({"event": event, "data": data}).encode()
