"""Health check and config endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from domainfront import __version__
from domainfront.api.deps import SettingsDep
from domainfront.api.schemas import ConfigCheckResponse, HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__)


@router.get("/config/check", response_model=ConfigCheckResponse)
def config_check(
    settings: SettingsDep,
) -> ConfigCheckResponse:
    return ConfigCheckResponse(
        configured={
            "whmcs": settings.whmcs_configured,
            "paystack": bool(settings.paystack_secret_key),
            "paystack_webhook": bool(settings.paystack_webhook_secret),
            "challenge_secret": bool(settings.challenge_secret),
        }
    )
