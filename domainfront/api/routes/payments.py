"""Paystack checkout endpoints and webhook receiver."""

from __future__ import annotations

from fastapi import APIRouter, Request

from domainfront.api.deps import OrdersDep, PaystackDep, SettingsDep
from domainfront.api.schemas import ApiResponse, PaymentInitializeRequest
from domainfront.errors import InvalidRequestError, NotConfiguredError

router = APIRouter(tags=["payments"])


@router.post("/payment/initialize", response_model=ApiResponse, response_model_exclude_none=True)
async def initialize_payment(
    request: PaymentInitializeRequest,
    paystack: PaystackDep,
    settings: SettingsDep,
) -> ApiResponse:
    if not request.amount or not request.email or not request.reference:
        raise InvalidRequestError("Missing required fields")

    callback_url = request.callback_url or f"{settings.app_base_url.rstrip('/')}/checkout/success"
    init = await paystack.initialize(
        amount=request.amount,
        email=request.email,
        reference=request.reference,
        callback_url=callback_url,
        metadata=request.metadata,
    )
    return ApiResponse(success=True, data=init.model_dump(mode="json"))


@router.get("/payment/verify", response_model=ApiResponse, response_model_exclude_none=True)
async def verify_payment(paystack: PaystackDep, reference: str = "") -> ApiResponse:
    if not reference:
        raise InvalidRequestError("Reference is required")
    transaction = await paystack.verify(reference)
    if transaction is None:
        raise InvalidRequestError("Payment verification failed")
    return ApiResponse(success=True, data=transaction)


@router.post("/webhooks/paystack", response_model=ApiResponse, response_model_exclude_none=True)
async def paystack_webhook(
    request: Request,
    orders: OrdersDep,
    settings: SettingsDep,
) -> ApiResponse:
    if not settings.paystack_webhook_secret:
        raise NotConfiguredError("paystack", "Webhook secret not configured")

    raw_body = await request.body()
    order = await orders.handle_webhook(
        raw_body,
        request.headers.get("x-paystack-signature"),
        settings.paystack_webhook_secret,
    )
    if order is None:
        return ApiResponse(success=True)
    return ApiResponse(success=True, data={"orderId": order.order_id})
