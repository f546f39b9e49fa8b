"""Connection-state evaluation for customer-owned domains.

A customer connecting an existing domain gets registrar instructions for one
of three setups (nameserver delegation, A records, or A + CNAME records). The
evaluator then reads the domain's live NS, A and CNAME records and reports
``verified`` as soon as *any* of these hold:

- every platform nameserver appears (case-insensitive substring) in at least
  one of the domain's current nameservers
- an A record equals the platform IP exactly
- a CNAME record contains the platform root domain

The predicate ignores which service type was requested, so a domain delegated
by nameserver counts as connected even when A records were asked for. It is a
propagation signal, not proof of control.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from domainfront.metrics import connection_checks_total
from domainfront.models.connection import (
    ConnectionResult,
    DNSInstructions,
    ServiceType,
    VerificationResult,
    VerificationStatus,
)
from domainfront.models.dns import DNSRecord, DNSSnapshot, RecordType

if TYPE_CHECKING:
    from domainfront.models.dns import PlatformTarget
    from domainfront.protocols import DnsResolver

logger = structlog.get_logger()


def build_instructions(
    domain: str,
    service_type: ServiceType,
    target: PlatformTarget,
) -> DNSInstructions:
    """Registrar steps and the records the customer must create."""
    ns = target.nameservers
    ip = target.ip_address
    a_records: list[DNSRecord] = []
    cname_records: list[DNSRecord] = []

    if service_type is ServiceType.HOSTING:
        steps = [
            "1. Log in to your domain registrar (GoDaddy, Namecheap, etc.)",
            "2. Find the DNS or Nameserver settings",
            "3. Update nameservers to:",
            *(f"   {server}" for server in ns),
            "4. Save changes and wait 24-48 hours for DNS propagation",
            "5. Your domain will be automatically configured once DNS propagates",
        ]
    elif service_type is ServiceType.WEBSITE_BUILDER:
        a_records = [DNSRecord(name="@", value=ip), DNSRecord(name="www", value=ip)]
        steps = [
            "1. Log in to your domain registrar",
            "2. Go to DNS settings",
            "3. Add these A records:",
            f"   @ (root domain) points to {ip}",
            f"   www points to {ip}",
            "4. Save changes and wait for propagation (up to 48 hours)",
            "5. Your website will be accessible once DNS propagates",
        ]
    else:
        storefront_host = f"{domain}.{target.root_domain}"
        shop_host = f"shop.{target.root_domain}"
        a_records = [DNSRecord(name="@", value=ip)]
        cname_records = [
            DNSRecord(name="www", value=storefront_host),
            DNSRecord(name="shop", value=shop_host),
        ]
        steps = [
            "1. Access your domain's DNS settings",
            "2. Add these records:",
            f"   A record: @ (root domain) points to {ip}",
            f"   CNAME: www points to {storefront_host}",
            f"   CNAME: shop points to {shop_host}",
            "3. Save and wait for DNS propagation (up to 48 hours)",
            "4. Your e-commerce store will be accessible once DNS propagates",
        ]

    return DNSInstructions(
        nameservers=list(ns),
        a_records=a_records,
        cname_records=cname_records,
        instructions=steps,
    )


def is_connected(snapshot: DNSSnapshot, target: PlatformTarget) -> bool:
    current_ns = [server.lower() for server in snapshot.nameservers]
    has_nameservers = bool(target.nameservers) and all(
        any(expected.lower() in server for server in current_ns)
        for expected in target.nameservers
    )
    has_a_record = any(record.value == target.ip_address for record in snapshot.a_records)
    has_cname = any(target.root_domain in record.value for record in snapshot.cname_records)
    return has_nameservers or has_a_record or has_cname


class ConnectionEvaluator:
    """Builds instructions and checks live DNS against the platform target."""

    def __init__(self, resolver: DnsResolver, target: PlatformTarget) -> None:
        self.resolver = resolver
        self.target = target

    async def fetch_snapshot(self, domain: str) -> DNSSnapshot:
        """NS, A and CNAME lookups run concurrently; a failed type is empty."""
        record_types = (RecordType.NS, RecordType.A, RecordType.CNAME)
        results = await asyncio.gather(
            *(self.resolver.lookup(domain, record_type) for record_type in record_types),
            return_exceptions=True,
        )

        per_type: dict[RecordType, list[DNSRecord]] = {}
        errors: list[str] = []
        for record_type, result in zip(record_types, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "DNS sub-lookup failed",
                    domain=domain,
                    record_type=record_type.value,
                    error=str(result),
                )
                errors.append(str(result) or type(result).__name__)
                per_type[record_type] = []
            else:
                per_type[record_type] = result

        return DNSSnapshot(
            nameservers=[record.value for record in per_type[RecordType.NS]],
            a_records=per_type[RecordType.A],
            cname_records=per_type[RecordType.CNAME],
            error=errors[0] if len(errors) == len(record_types) else None,
        )

    def is_connected(self, snapshot: DNSSnapshot) -> bool:
        return is_connected(snapshot, self.target)

    async def evaluate(
        self,
        domain: str,
        service_type: ServiceType = ServiceType.HOSTING,
    ) -> ConnectionResult:
        """Instructions plus current verification state. Never raises."""
        logger.info("Checking domain connection", domain=domain, service_type=service_type.value)
        try:
            instructions = build_instructions(domain, service_type, self.target)
            snapshot = await self.fetch_snapshot(domain)
            status = (
                VerificationStatus.VERIFIED
                if self.is_connected(snapshot)
                else VerificationStatus.PENDING
            )
        except Exception as exc:
            logger.error("Domain connection check failed", domain=domain, error=str(exc))
            connection_checks_total.labels(status=VerificationStatus.FAILED.value).inc()
            return ConnectionResult(
                success=False,
                domain=domain,
                instructions=[],
                verification_status=VerificationStatus.FAILED,
                error=str(exc) or "Unknown error occurred",
            )

        connection_checks_total.labels(status=status.value).inc()
        return ConnectionResult(
            success=True,
            domain=domain,
            nameservers=instructions.nameservers,
            a_records=instructions.a_records,
            cname_records=instructions.cname_records,
            instructions=instructions.instructions,
            verification_status=status,
            current_dns_status=snapshot,
        )

    async def verify(self, domain: str) -> VerificationResult:
        """Current status only, as polled by the verification loop. Never raises."""
        try:
            snapshot = await self.fetch_snapshot(domain)
            status = (
                VerificationStatus.VERIFIED
                if self.is_connected(snapshot)
                else VerificationStatus.PENDING
            )
        except Exception as exc:
            logger.error("Domain verification failed", domain=domain, error=str(exc))
            connection_checks_total.labels(status=VerificationStatus.FAILED.value).inc()
            return VerificationResult(
                success=False,
                status=VerificationStatus.FAILED,
                domain=domain,
                error="Failed to verify domain",
            )

        connection_checks_total.labels(status=status.value).inc()
        return VerificationResult(success=True, status=status, domain=domain, dns_status=snapshot)
