"""
Product Finance Endpoints

GL code, deferred revenue flag and static deferral dates of a product.

Author: TM3
Date: 2025-11-20
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from revenue_deferral.api.dependencies import get_export_adapter, get_product_finance_meta, get_product_repository
from revenue_deferral.repositories.product_repository import ProductRepository
from revenue_deferral.services.export_adapter import ExportAdapter
from revenue_deferral.services.product_finance_meta import ProductFinanceMeta

router = APIRouter()


class ProductFinanceUpdate(BaseModel):
    gl_code: Optional[str] = Field(None, description="GL mapping from the financial system")
    deferred_required: Optional[bool] = Field(None, description="Product uses a deferred revenue schedule")
    start_date: Optional[str] = Field(None, description="Deferral start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Deferral end date (YYYY-MM-DD)")


def _product_finance(product, product_meta: ProductFinanceMeta) -> dict:
    dates = product_meta.get_deferral_dates(product)
    return {
        "product_id": product.id,
        "gl_code": product_meta.get_gl_code(product),
        "deferred_required": product_meta.is_deferred_required(product),
        "start_date": dates["start_date"],
        "end_date": dates["end_date"],
    }


@router.get("/{product_id}/finance")
async def get_product_finance(
    product_id: int,
    product_repository: ProductRepository = Depends(get_product_repository),
    product_meta: ProductFinanceMeta = Depends(get_product_finance_meta),
    export_adapter: ExportAdapter = Depends(get_export_adapter)
):
    try:
        product = product_repository.find_by_id(product_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")

    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

    return {
        "status": "success",
        "data": _product_finance(product, product_meta),
        "export": export_adapter.add_product_export_data({"product_id": product.id, "name": product.name}, product)
    }


@router.put("/{product_id}/finance")
async def update_product_finance(
    product_id: int,
    body: ProductFinanceUpdate,
    product_meta: ProductFinanceMeta = Depends(get_product_finance_meta)
):
    """
    Update product finance meta

    Saved even when the dates are inconsistent; the problems come back as
    notices so the editor can fix them.
    """
    try:
        product = product_meta.update_product_meta(
            product_id,
            gl_code=body.gl_code,
            deferred_required=body.deferred_required,
            start_date=body.start_date,
            end_date=body.end_date
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")

    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {product_id} not found")

    return {
        "status": "success",
        "data": _product_finance(product, product_meta),
        "notices": product_meta.validate_product_dates(product)
    }
