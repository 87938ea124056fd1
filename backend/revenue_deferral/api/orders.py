"""
Order Finance Endpoints

Line item finance data (term dates, GL code), customer display rows per
surface, manual date edits and CSV export.

Author: TM3
Date: 2025-11-20
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field
from typing import Dict, Optional

from revenue_deferral.api.dependencies import (
    get_customer_display,
    get_export_adapter,
    get_line_item_meta,
    get_order_repository,
)
from revenue_deferral.repositories.order_repository import OrderRepository
from revenue_deferral.services.customer_display import CustomerDisplay
from revenue_deferral.services.export_adapter import ExportAdapter
from revenue_deferral.services.finance_settings import SURFACES
from revenue_deferral.services.line_item_meta import LineItemMeta

router = APIRouter()


class LineItemDatesInput(BaseModel):
    start_date: str = Field("", description="Term start date (YYYY-MM-DD), empty to clear")
    end_date: str = Field("", description="Term end date (YYYY-MM-DD), empty to clear")


class LineItemDatesUpdate(BaseModel):
    items: Dict[int, LineItemDatesInput] = Field(..., description="Dates per line item ID")
    user_name: Optional[str] = Field(None, description="Who made the change")


@router.get("/{order_id}/finance")
async def get_order_finance(
    order_id: int,
    order_repository: OrderRepository = Depends(get_order_repository),
    line_item_meta: LineItemMeta = Depends(get_line_item_meta)
):
    """
    Get finance data for every line item of an order

    Returns term dates and GL code per item plus the order notes
    """
    try:
        order = order_repository.find_by_id(order_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")

    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

    items = []
    for item in order.items:
        items.append({
            "item_id": item.id,
            "product_id": item.effective_product_id,
            "name": item.name,
            **line_item_meta.get_line_item_data(item)
        })

    return {
        "status": "success",
        "data": {
            "order_id": order.id,
            "order_status": order.status,
            "items": items,
            "notes": [note.content for note in order.notes]
        }
    }


@router.get("/{order_id}/finance/display")
async def get_order_finance_display(
    order_id: int,
    surface: str = Query(..., description="Surface: order_confirmation, emails, my_account, subscriptions, pdf_invoice"),
    customer_display: CustomerDisplay = Depends(get_customer_display)
):
    """Term dates the customer sees on a surface (eligible items only)"""
    if surface not in SURFACES:
        raise HTTPException(status_code=400, detail=f"surface must be one of: {', '.join(SURFACES)}")

    try:
        rows = customer_display.get_order_display(order_id, surface)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching display data: {str(e)}")

    if rows is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

    return {
        "status": "success",
        "surface": surface,
        "count": len(rows),
        "data": rows
    }


@router.put("/{order_id}/finance")
async def update_order_finance(
    order_id: int,
    body: LineItemDatesUpdate,
    order_repository: OrderRepository = Depends(get_order_repository),
    line_item_meta: LineItemMeta = Depends(get_line_item_meta)
):
    """
    Manually edit line item term dates

    Items with an invalid pair are skipped and reported in notices
    """
    try:
        if order_repository.find_by_id(order_id) is None:
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

        submitted = {item_id: dates.model_dump() for item_id, dates in body.items.items()}
        notices = line_item_meta.save_line_item_meta(order_id, submitted, body.user_name)

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating line item dates: {str(e)}")

    return {
        "status": "success" if not notices else "partial",
        "notices": notices
    }


@router.get("/{order_id}/finance/export")
async def export_order_finance(
    order_id: int,
    order_repository: OrderRepository = Depends(get_order_repository),
    export_adapter: ExportAdapter = Depends(get_export_adapter)
):
    """CSV export of the order's line items with finance columns"""
    try:
        order = order_repository.find_by_id(order_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")

    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

    return Response(
        content=export_adapter.order_items_csv(order),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="order-{order_id}-finance.csv"'}
    )
