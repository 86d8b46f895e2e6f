"""
Business settings API endpoints
"""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import get_settings
from backend.database import get_db
from backend.models.user import AuthorizedUser
from backend.api.auth import get_current_user
from backend.services.business_settings import (
    SettingsDefaults,
    get_business_settings,
    update_business_settings,
)
from backend.utils.validators import validate_amount, validate_clock_time, validate_rate

router = APIRouter()


# --- Pydantic Schemas ---

class BusinessSettingsResponse(BaseModel):
    id: Optional[int] = None  # None until the first save
    price_per_plate: float
    tax_rate: float
    delivery_charge: float
    business_name: str
    business_phone: str
    business_address: str
    currency: str
    open_time: str
    close_time: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BusinessSettingsUpdate(BaseModel):
    price_per_plate: Optional[float] = None
    tax_rate: Optional[float] = None
    delivery_charge: Optional[float] = None
    business_name: Optional[str] = None
    business_phone: Optional[str] = None
    business_address: Optional[str] = None
    currency: Optional[str] = None
    open_time: Optional[str] = None
    close_time: Optional[str] = None

    @field_validator("price_per_plate", "delivery_charge")
    @classmethod
    def _amounts(cls, v):
        return validate_amount(v) if v is not None else v

    @field_validator("tax_rate")
    @classmethod
    def _rate(cls, v):
        return validate_rate(v) if v is not None else v

    @field_validator("open_time", "close_time")
    @classmethod
    def _times(cls, v):
        return validate_clock_time(v) if v is not None else v


def get_settings_defaults() -> SettingsDefaults:
    return SettingsDefaults.from_settings(get_settings())


# --- Endpoints ---

@router.get("/", response_model=BusinessSettingsResponse)
async def read_settings(
    db: AsyncSession = Depends(get_db),
    defaults: SettingsDefaults = Depends(get_settings_defaults),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    """Stored settings, or the defaults when nothing has been saved yet"""
    row = await get_business_settings(db)
    if row:
        return row
    return BusinessSettingsResponse(**defaults.model_dump())


@router.put("/", response_model=BusinessSettingsResponse)
async def write_settings(
    data: BusinessSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    defaults: SettingsDefaults = Depends(get_settings_defaults),
    current_user: AuthorizedUser = Depends(get_current_user)
):
    return await update_business_settings(db, data.model_dump(exclude_none=True), defaults)
