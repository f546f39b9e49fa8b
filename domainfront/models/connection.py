"""Domain connection models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from domainfront.models.base import WireModel
from domainfront.models.dns import DNSRecord, DNSSnapshot


class VerificationStatus(StrEnum):
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not VerificationStatus.PENDING


class ServiceType(StrEnum):
    HOSTING = "hosting"
    WEBSITE_BUILDER = "website_builder"
    ECOMMERCE = "ecommerce"


class DNSInstructions(WireModel):
    """What the customer must configure at their registrar."""

    nameservers: list[str]
    a_records: list[DNSRecord] = Field(default_factory=list)
    cname_records: list[DNSRecord] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)


class ConnectionResult(WireModel):
    """Outcome of one connection check. Recomputed from live DNS on every call."""

    success: bool
    domain: str
    nameservers: list[str] | None = None
    a_records: list[DNSRecord] | None = None
    cname_records: list[DNSRecord] | None = None
    instructions: list[str] = Field(default_factory=list)
    verification_status: VerificationStatus
    error: str | None = None
    current_dns_status: DNSSnapshot | None = None


class VerificationResult(WireModel):
    """Body of ``GET /verify-domain``."""

    success: bool
    status: VerificationStatus
    domain: str
    dns_status: DNSSnapshot | None = None
    error: str | None = None
