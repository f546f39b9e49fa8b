"""API request/response schemas (separate from domain models)."""

from __future__ import annotations

from typing import Any

from domainfront.models.base import WireModel
from domainfront.models.connection import ServiceType

# --- Responses ---


class ApiResponse(WireModel):
    success: bool
    data: Any = None
    message: str | None = None
    error: str | None = None


class HealthResponse(WireModel):
    status: str
    version: str


class ConfigCheckResponse(WireModel):
    configured: dict[str, bool]


# --- Requests ---
# Fields default to empty so routes can answer with specific 400 messages
# instead of a generic validation error.


class SearchRequest(WireModel):
    domain: str = ""
    answer: Any = None
    challenge_id: str = ""
    sig: str = ""


class ConnectDomainRequest(WireModel):
    domain: str = ""
    service_type: ServiceType = ServiceType.HOSTING


class PaymentInitializeRequest(WireModel):
    amount: float = 0
    email: str = ""
    reference: str = ""
    callback_url: str | None = None
    metadata: dict[str, Any] | None = None
    currency: str | None = None


class OrderCreateRequest(WireModel):
    customer_data: Any = None
    domains: Any = None
    payment_method: str = "paystack"


class RenewRequest(WireModel):
    domain_id: str = ""
    period: int = 0
    auto_renew: bool = False


class DomainUpdateRequest(WireModel):
    action: str = ""
    domain_id: str = ""
    auto_renew: bool | None = None
    nameservers: list[str] | None = None
