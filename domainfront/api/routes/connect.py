"""Existing-domain connection and verification endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from domainfront.api.deps import EvaluatorDep
from domainfront.api.schemas import ConnectDomainRequest
from domainfront.errors import InvalidRequestError
from domainfront.models.connection import ConnectionResult, VerificationResult

router = APIRouter(tags=["connect"])


@router.post(
    "/connect-domain",
    response_model=ConnectionResult,
    response_model_exclude_none=True,
)
async def connect_domain(
    request: ConnectDomainRequest,
    evaluator: EvaluatorDep,
) -> ConnectionResult:
    domain = request.domain.strip().lower()
    if not domain:
        raise InvalidRequestError("Domain is required")
    return await evaluator.evaluate(domain, request.service_type)


@router.get(
    "/verify-domain",
    response_model=VerificationResult,
    response_model_exclude_none=True,
)
async def verify_domain(
    evaluator: EvaluatorDep,
    domain: str = "",
) -> VerificationResult | JSONResponse:
    domain = domain.strip().lower()
    if not domain:
        raise InvalidRequestError("Domain parameter is required")

    result = await evaluator.verify(domain)
    if not result.success:
        return JSONResponse(
            status_code=500,
            content=result.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    return result
