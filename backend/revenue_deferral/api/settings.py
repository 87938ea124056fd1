"""
Finance Settings Endpoints

Author: TM3
Date: 2025-11-20
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional

from revenue_deferral.api.dependencies import get_finance_settings
from revenue_deferral.services.finance_settings import FinanceSettings

router = APIRouter()


class FinanceSettingsUpdate(BaseModel):
    """Only the fields that are sent are changed"""
    enable_system: Optional[bool] = Field(None, description="Turn the finance dates feature on/off")
    eligible_categories: Optional[List[int]] = Field(None, description="Category IDs shown to customers")
    visibility_surfaces: Optional[List[str]] = Field(None, description="Surfaces where dates are shown")
    dynamic_date_triggers: Optional[List[str]] = Field(None, description="Order statuses that trigger dynamic dates")


@router.get("/finance")
async def get_settings(settings: FinanceSettings = Depends(get_finance_settings)):
    try:
        return {"status": "success", "data": settings.get_all()}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching settings: {str(e)}")


@router.put("/finance")
async def update_settings(
    body: FinanceSettingsUpdate,
    settings: FinanceSettings = Depends(get_finance_settings)
):
    try:
        if body.enable_system is not None:
            settings.set_system_enabled(body.enable_system)
        if body.eligible_categories is not None:
            settings.save_eligible_categories(body.eligible_categories)
        if body.visibility_surfaces is not None:
            settings.save_visibility_surfaces(body.visibility_surfaces)
        if body.dynamic_date_triggers is not None:
            settings.save_dynamic_date_triggers(body.dynamic_date_triggers)

        return {"status": "success", "data": settings.get_all()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating settings: {str(e)}")


@router.post("/finance/reset")
async def reset_settings(settings: FinanceSettings = Depends(get_finance_settings)):
    try:
        settings.reset_to_defaults()
        return {"status": "success", "data": settings.get_all()}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error resetting settings: {str(e)}")
