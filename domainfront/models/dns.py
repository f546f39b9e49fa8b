"""DNS value models: resolved records, snapshots and the platform target."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from domainfront.models.base import WireModel, utcnow_iso


class RecordType(StrEnum):
    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    NS = "NS"
    MX = "MX"
    TXT = "TXT"


class DNSRecord(WireModel):
    """One resolved record of a given type."""

    name: str
    value: str


class TypedDNSRecord(WireModel):
    """A record carrying its type and TTL, used by the DNS listing endpoint."""

    type: RecordType
    name: str
    value: str
    ttl: int = 0


class DNSSnapshot(WireModel):
    """Point-in-time view of a domain's NS, A and CNAME records."""

    nameservers: list[str] = Field(default_factory=list)
    a_records: list[DNSRecord] = Field(default_factory=list)
    cname_records: list[DNSRecord] = Field(default_factory=list)
    timestamp: str = Field(default_factory=utcnow_iso)
    error: str | None = None


class PlatformTarget(BaseModel):
    """Where a connected domain is expected to point. Process-wide constant."""

    model_config = ConfigDict(frozen=True)

    nameservers: tuple[str, ...]
    ip_address: str
    cdn_endpoint: str
    root_domain: str
