"""DNS-over-HTTPS client for Google's public JSON resolver.

API: ``GET /resolve?name=<domain>&type=<TYPE>`` answering
``{"Status": 0, "Answer": [{"name", "type", "TTL", "data"}]}``. ``Answer`` is
absent when the name has no records of that type.

``lookup`` raises DnsLookupError when the resolver cannot answer, so callers
can tell an outage from "no records". ``resolve`` and the listing helpers are
best-effort: a failure is logged and becomes an empty result.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog

from domainfront.errors import DnsLookupError
from domainfront.metrics import dns_lookups_total
from domainfront.models.dns import DNSRecord, RecordType, TypedDNSRecord

logger = structlog.get_logger()

DEFAULT_LISTING_TYPES = (RecordType.A, RecordType.CNAME, RecordType.MX)


class DohClient:
    """Resolve records through a DNS-over-HTTPS JSON endpoint."""

    def __init__(self, base_url: str = "https://dns.google/resolve", timeout: float = 10.0) -> None:
        self.base_url = base_url
        self.timeout = timeout

    async def _answers(self, domain: str, record_type: RecordType) -> list[dict[str, object]]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(
                    self.base_url,
                    params={"name": domain, "type": record_type.value},
                )
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "DNS lookup failed",
                domain=domain,
                record_type=record_type.value,
                error=str(exc),
            )
            dns_lookups_total.labels(record_type=record_type.value, outcome="error").inc()
            message = f"DNS lookup failed for {record_type.value}"
            raise DnsLookupError(record_type.value, message) from exc

        raw_answers = data.get("Answer", []) if isinstance(data, dict) else []
        if not isinstance(raw_answers, list):
            raw_answers = []
        answers = [item for item in raw_answers if isinstance(item, dict)]
        outcome = "ok" if answers else "empty"
        dns_lookups_total.labels(record_type=record_type.value, outcome=outcome).inc()
        return answers

    async def lookup(self, domain: str, record_type: RecordType) -> list[DNSRecord]:
        """Return ``{name, value}`` pairs for every answer of *record_type*.

        For NS lookups ``value`` is the nameserver host from the answer's data
        field, trailing dot included.

        Raises:
            DnsLookupError: transport failure, non-2xx status or undecodable body.
        """
        answers = await self._answers(domain, record_type)
        return [
            DNSRecord(name=str(item.get("name", "")), value=str(item.get("data", "")))
            for item in answers
        ]

    async def resolve(self, domain: str, record_type: RecordType) -> list[DNSRecord]:
        """Best-effort lookup: a failed lookup is an empty list. Never raises."""
        try:
            return await self.lookup(domain, record_type)
        except DnsLookupError:
            return []

    async def resolve_typed(self, domain: str, record_type: RecordType) -> list[TypedDNSRecord]:
        try:
            answers = await self._answers(domain, record_type)
        except DnsLookupError:
            return []
        records: list[TypedDNSRecord] = []
        for item in answers:
            ttl = item.get("TTL", 0)
            records.append(
                TypedDNSRecord(
                    type=record_type,
                    name=str(item.get("name", "")),
                    value=str(item.get("data", "")),
                    ttl=ttl if isinstance(ttl, int) else 0,
                )
            )
        return records

    async def resolve_records(
        self,
        domain: str,
        record_types: tuple[RecordType, ...] = DEFAULT_LISTING_TYPES,
    ) -> list[TypedDNSRecord]:
        """Listing of several record types, looked up concurrently."""
        per_type = await asyncio.gather(
            *(self.resolve_typed(domain, record_type) for record_type in record_types)
        )
        return [record for records in per_type for record in records]
