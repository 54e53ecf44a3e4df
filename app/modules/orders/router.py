"""Student orders API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.modules.orders.schemas import OrderCapture, OrderCreate, OrderCreatedRead, OrderRead
from app.modules.orders.service import OrderService, get_order_service
from app.shared.pagination import Page, build_page, get_pagination_params
from app.shared.schemas import ApiResponse

router = APIRouter(prefix="/student/order", tags=["orders"])


@router.post(
    "/create",
    response_model=ApiResponse[OrderCreatedRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    payload: OrderCreate,
    service: OrderService = Depends(get_order_service),
) -> ApiResponse[OrderCreatedRead]:
    """Start a purchase; free courses are enrolled right away."""
    placement = await service.create_order(payload)
    message = "Free course enrolled successfully." if placement.approve_url is None else None
    return ApiResponse[OrderCreatedRead](
        message=message,
        data=OrderCreatedRead(approve_url=placement.approve_url, order_id=placement.order.id),
    )


@router.post("/capture", response_model=ApiResponse[OrderRead])
async def capture_payment_and_finalize_order(
    payload: OrderCapture,
    service: OrderService = Depends(get_order_service),
) -> ApiResponse[OrderRead]:
    """Confirm an approved payment and enroll the purchaser."""
    order = await service.capture_payment(payload)
    return ApiResponse[OrderRead](message="Order confirmed", data=OrderRead.model_validate(order))


@router.get("/users/{user_id}", response_model=Page[OrderRead])
async def list_user_orders(
    user_id: str,
    pagination=Depends(get_pagination_params),
    service: OrderService = Depends(get_order_service),
) -> Page[OrderRead]:
    """Order history of a purchaser, newest first."""
    items, total = await service.list_user_orders(
        user_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    serialized = [OrderRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/{order_id}", response_model=ApiResponse[OrderRead])
async def get_order(
    order_id: UUID,
    service: OrderService = Depends(get_order_service),
) -> ApiResponse[OrderRead]:
    order = await service.get_order(order_id)
    return ApiResponse[OrderRead](data=OrderRead.model_validate(order))
