"""Registrar-facing models: search results, managed domains, pricing."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from domainfront.models.base import WireModel
from domainfront.models.dns import TypedDNSRecord


class DomainLifecycle(StrEnum):
    ACTIVE = "active"
    EXPIRED = "expired"
    SUSPENDED = "suspended"
    PENDING = "pending"

    @classmethod
    def from_whmcs(cls, raw: str) -> DomainLifecycle:
        """Map a WHMCS domain status onto the four states the storefront shows."""
        lowered = (raw or "").lower()
        if lowered in ("active", "expired", "suspended"):
            return cls(lowered)
        return cls.PENDING


class DomainSearchResult(WireModel):
    domain: str
    available: bool
    price: float = 0
    currency: str = "USD"
    registration_period: int = 1
    renewal_price: float | None = None


class TldPricing(WireModel):
    price: float
    currency: str
    renewal_price: float | None = None


class RenewalPricing(WireModel):
    price: float
    currency: str


class ManagedDomain(WireModel):
    """A domain owned by a WHMCS client."""

    id: str
    domain: str
    status: DomainLifecycle
    registration_date: str | None = None
    expiry_date: str | None = None
    auto_renew: bool = False
    nameservers: list[str] = Field(default_factory=list)
    registrar: str = "Unknown"
    renewal_price: float = 0
    currency: str = "NGN"
    dns_records: list[TypedDNSRecord] | None = None
    last_checked: str


class DomainStatus(WireModel):
    domain: str
    status: DomainLifecycle
    expiry_date: str | None = None
    days_until_expiry: int | None = None
    urgency: str | None = None
    auto_renew: bool = False
    nameservers: list[str] = Field(default_factory=list)
    last_checked: str


class RenewalResult(WireModel):
    success: bool
    message: str
    order_id: str | None = None
    error: str | None = None


class ExpiryStatus(WireModel):
    days_until_expiry: int
    status: str
    urgency: str
