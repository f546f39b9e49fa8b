"""Challenge-gated domain availability search."""

from __future__ import annotations

from fastapi import APIRouter

from domainfront.api.deps import GateDep, RegistrarDep
from domainfront.api.schemas import SearchRequest
from domainfront.challenge import coerce_answer
from domainfront.errors import InvalidRequestError
from domainfront.models.challenge import Challenge
from domainfront.models.registrar import DomainSearchResult

router = APIRouter(prefix="/domains", tags=["search"])


@router.get("/search", response_model=Challenge)
def issue_challenge(gate: GateDep) -> Challenge:
    return gate.issue()


@router.post("/search", response_model=DomainSearchResult)
async def search_domain(
    request: SearchRequest,
    gate: GateDep,
    registrar: RegistrarDep,
) -> DomainSearchResult:
    domain = request.domain.strip().lower()
    if not domain:
        raise InvalidRequestError("Domain parameter is required")

    answer = coerce_answer(request.answer)
    if answer is None or not request.challenge_id or not request.sig:
        raise InvalidRequestError("Challenge validation failed")

    gate.require(answer, request.challenge_id, request.sig)
    return await registrar.check_availability(domain)


@router.get("/suggestions", response_model=list[str])
def domain_suggestions(name: str, registrar: RegistrarDep) -> list[str]:
    return registrar.suggestions(name)
