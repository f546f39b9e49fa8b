"""Pydantic value models for the storefront backend."""

from domainfront.models.challenge import Challenge
from domainfront.models.connection import (
    ConnectionResult,
    DNSInstructions,
    ServiceType,
    VerificationResult,
    VerificationStatus,
)
from domainfront.models.dns import (
    DNSRecord,
    DNSSnapshot,
    PlatformTarget,
    RecordType,
    TypedDNSRecord,
)
from domainfront.models.payment import (
    CustomerData,
    DomainOrderType,
    OrderDomain,
    OrderResult,
    PaymentInitialization,
)
from domainfront.models.registrar import (
    DomainLifecycle,
    DomainSearchResult,
    DomainStatus,
    ExpiryStatus,
    ManagedDomain,
    RenewalPricing,
    RenewalResult,
    TldPricing,
)

__all__ = [
    "Challenge",
    "ConnectionResult",
    "CustomerData",
    "DNSInstructions",
    "DNSRecord",
    "DNSSnapshot",
    "DomainLifecycle",
    "DomainOrderType",
    "DomainSearchResult",
    "DomainStatus",
    "ExpiryStatus",
    "ManagedDomain",
    "OrderDomain",
    "OrderResult",
    "PaymentInitialization",
    "PlatformTarget",
    "RecordType",
    "RenewalPricing",
    "RenewalResult",
    "ServiceType",
    "TldPricing",
    "TypedDNSRecord",
    "VerificationResult",
    "VerificationStatus",
]
