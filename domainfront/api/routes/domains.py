"""Managed-domain endpoints: DNS listing, pricing, status, renewal, updates."""

from __future__ import annotations

from fastapi import APIRouter

from domainfront.api.deps import DnsDep, RegistrarDep
from domainfront.api.schemas import ApiResponse, DomainUpdateRequest, RenewRequest
from domainfront.errors import InvalidRequestError
from domainfront.models.registrar import RenewalResult

router = APIRouter(prefix="/domains", tags=["domains"])


def _require_domain(domain: str) -> str:
    domain = domain.strip().lower()
    if not domain:
        raise InvalidRequestError("Domain name is required")
    return domain


@router.get("/dns", response_model=ApiResponse, response_model_exclude_none=True)
async def dns_records(dns: DnsDep, domain: str = "") -> ApiResponse:
    records = await dns.resolve_records(_require_domain(domain))
    return ApiResponse(success=True, data=[r.model_dump(mode="json") for r in records])


@router.get("/pricing", response_model=ApiResponse, response_model_exclude_none=True)
async def renewal_pricing(registrar: RegistrarDep, domain: str = "") -> ApiResponse:
    pricing = await registrar.renewal_pricing(_require_domain(domain))
    return ApiResponse(success=True, data=pricing.model_dump(mode="json", by_alias=True))


@router.get("/status", response_model=ApiResponse, response_model_exclude_none=True)
async def domain_status(registrar: RegistrarDep, domain: str = "") -> ApiResponse:
    status = await registrar.domain_status(_require_domain(domain))
    return ApiResponse(success=True, data=status.model_dump(mode="json", by_alias=True))


@router.get("", response_model=ApiResponse, response_model_exclude_none=True)
async def list_domains(
    registrar: RegistrarDep,
    clientId: str = "",  # noqa: N803
    domainId: str = "",  # noqa: N803
) -> ApiResponse:
    if domainId:
        managed = await registrar.get_domain(domainId)
        return ApiResponse(
            success=True,
            data=managed.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    if clientId:
        domains = await registrar.list_client_domains(clientId)
        return ApiResponse(
            success=True,
            data=[d.model_dump(mode="json", by_alias=True, exclude_none=True) for d in domains],
        )
    raise InvalidRequestError("Client ID or Domain ID is required")


@router.put("", response_model=ApiResponse, response_model_exclude_none=True)
async def update_domain(request: DomainUpdateRequest, registrar: RegistrarDep) -> ApiResponse:
    if not request.domain_id:
        raise InvalidRequestError("Domain ID is required")

    if request.action == "updateAutoRenewal":
        await registrar.update_auto_renew(request.domain_id, bool(request.auto_renew))
        return ApiResponse(success=True, message="Auto-renewal setting updated successfully")
    if request.action == "updateNameservers":
        await registrar.update_nameservers(request.domain_id, request.nameservers or [])
        return ApiResponse(success=True, message="Nameservers updated successfully")
    raise InvalidRequestError("Invalid action")


@router.post("/renew", response_model=RenewalResult, response_model_exclude_none=True)
async def renew_domain(request: RenewRequest, registrar: RegistrarDep) -> RenewalResult:
    if not request.domain_id or not request.period:
        raise InvalidRequestError("Domain ID and renewal period are required")
    return await registrar.renew(request.domain_id, request.period, request.auto_renew)
