"""
Lifecycle Hook Endpoints

The host's event dispatcher posts order and membership lifecycle events
here. Once the payload is valid the response is always "accepted": what
happened to each line item is only visible in the finance log.

Author: TM3
Date: 2025-11-20
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import Any, Dict

from revenue_deferral.api.dependencies import get_dynamic_dates, get_line_item_meta, get_order_repository
from revenue_deferral.repositories.order_repository import OrderRepository
from revenue_deferral.services.dynamic_dates import DynamicDates
from revenue_deferral.services.line_item_meta import LineItemMeta

router = APIRouter()


class OrderStatusChangedEvent(BaseModel):
    order_id: int = Field(..., description="Order ID")
    old_status: str = Field(..., description="Status before the change")
    new_status: str = Field(..., description="Status after the change")


class OrderCreatedEvent(BaseModel):
    order_id: int = Field(..., description="Order ID")


class MembershipCreatedEvent(BaseModel):
    """Membership payload as sent by the membership subsystem"""
    membership: Dict[str, Any] = Field(..., description="Membership data (membership_post_id, ...)")
    is_renewal: bool = Field(False, description="Membership was created by a renewal")
    is_upgrade: bool = Field(False, description="Membership status cycled (upgrade/downgrade)")


class LineItemCreatedEvent(BaseModel):
    order_id: int = Field(..., description="Order ID")
    item_id: int = Field(..., description="New line item ID")


ACCEPTED = {"status": "accepted"}


@router.post("/order-status-changed")
async def order_status_changed(
    event: OrderStatusChangedEvent,
    dynamic_dates: DynamicDates = Depends(get_dynamic_dates)
):
    """Order moved from old_status to new_status"""
    dynamic_dates.on_order_status_changed(event.order_id, event.old_status, event.new_status)
    return ACCEPTED


@router.post("/order-created")
async def order_created(
    event: OrderCreatedEvent,
    dynamic_dates: DynamicDates = Depends(get_dynamic_dates),
    order_repository: OrderRepository = Depends(get_order_repository)
):
    """New order created; its initial status may already be a trigger"""
    try:
        order = order_repository.find_by_id(event.order_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading order: {str(e)}")

    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {event.order_id} not found")

    dynamic_dates.on_order_created(event.order_id, order)
    return ACCEPTED


@router.post("/membership-created")
async def membership_created(
    event: MembershipCreatedEvent,
    dynamic_dates: DynamicDates = Depends(get_dynamic_dates)
):
    """Membership record created or renewed, carries authoritative dates"""
    dynamic_dates.on_membership_created(event.membership, event.is_renewal, event.is_upgrade)
    return ACCEPTED


@router.post("/line-item-created")
async def line_item_created(
    event: LineItemCreatedEvent,
    line_item_meta: LineItemMeta = Depends(get_line_item_meta)
):
    """Line item added to an order: copy the product's GL code and static dates"""
    try:
        populated = line_item_meta.populate_from_product(event.order_id, event.item_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error populating line item: {str(e)}")

    if not populated:
        raise HTTPException(
            status_code=404,
            detail=f"Line item {event.item_id} of order {event.order_id} or its product not found"
        )

    return ACCEPTED
