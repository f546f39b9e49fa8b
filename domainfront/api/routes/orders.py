"""Order creation endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from domainfront.api.deps import OrdersDep
from domainfront.api.schemas import ApiResponse, OrderCreateRequest

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/create", response_model=ApiResponse, response_model_exclude_none=True)
async def create_order(request: OrderCreateRequest, orders: OrdersDep) -> ApiResponse:
    order = await orders.create_order(
        request.customer_data,
        request.domains,
        payment_method=request.payment_method,
    )
    return ApiResponse(success=True, data=order.model_dump(mode="json", by_alias=True))
