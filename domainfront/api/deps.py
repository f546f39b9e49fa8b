"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from domainfront.challenge import ChallengeGate
from domainfront.clients.doh import DohClient
from domainfront.clients.paystack import PaystackClient
from domainfront.config import Settings
from domainfront.connection import ConnectionEvaluator
from domainfront.orders import OrderService
from domainfront.registrar import Registrar


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def _get_gate(request: Request) -> ChallengeGate:
    return request.app.state.challenge_gate  # type: ignore[no-any-return]


def _get_evaluator(request: Request) -> ConnectionEvaluator:
    return request.app.state.evaluator  # type: ignore[no-any-return]


def _get_dns(request: Request) -> DohClient:
    return request.app.state.dns  # type: ignore[no-any-return]


def _get_registrar(request: Request) -> Registrar:
    return request.app.state.registrar  # type: ignore[no-any-return]


def _get_orders(request: Request) -> OrderService:
    return request.app.state.orders  # type: ignore[no-any-return]


def _get_paystack(request: Request) -> PaystackClient:
    return request.app.state.paystack  # type: ignore[no-any-return]


SettingsDep = Annotated[Settings, Depends(_get_settings)]
GateDep = Annotated[ChallengeGate, Depends(_get_gate)]
EvaluatorDep = Annotated[ConnectionEvaluator, Depends(_get_evaluator)]
DnsDep = Annotated[DohClient, Depends(_get_dns)]
RegistrarDep = Annotated[Registrar, Depends(_get_registrar)]
OrdersDep = Annotated[OrderService, Depends(_get_orders)]
PaystackDep = Annotated[PaystackClient, Depends(_get_paystack)]
