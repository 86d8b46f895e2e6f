"""
Business settings access - a single stored row, created from defaults on first write
"""
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.config import Settings
from backend.models.business_settings import BusinessSettings

logger = logging.getLogger(__name__)


class SettingsDefaults(BaseModel):
    """Values used for any field the first write does not supply"""
    price_per_plate: float = 150.0
    tax_rate: float = 0.0
    delivery_charge: float = 0.0
    business_name: str = "Biryani House"
    business_phone: str = ""
    business_address: str = ""
    currency: str = "₹"
    open_time: str = "10:00"
    close_time: str = "22:00"

    @classmethod
    def from_settings(cls, settings: Settings) -> "SettingsDefaults":
        return cls(
            price_per_plate=settings.DEFAULT_PRICE_PER_PLATE,
            tax_rate=settings.DEFAULT_TAX_RATE,
            delivery_charge=settings.DEFAULT_DELIVERY_CHARGE,
            business_name=settings.DEFAULT_BUSINESS_NAME,
            business_phone=settings.DEFAULT_BUSINESS_PHONE,
            business_address=settings.DEFAULT_BUSINESS_ADDRESS,
            currency=settings.DEFAULT_CURRENCY,
            open_time=settings.DEFAULT_OPEN_TIME,
            close_time=settings.DEFAULT_CLOSE_TIME,
        )


async def get_business_settings(db: AsyncSession) -> Optional[BusinessSettings]:
    result = await db.execute(select(BusinessSettings).order_by(BusinessSettings.id).limit(1))
    return result.scalar_one_or_none()


async def update_business_settings(
    db: AsyncSession,
    updates: Dict[str, Any],
    defaults: SettingsDefaults,
) -> BusinessSettings:
    """Apply updates to the stored settings, creating the row if there is none"""
    row = await get_business_settings(db)

    if row:
        for key, value in updates.items():
            setattr(row, key, value)
    else:
        values = defaults.model_dump()
        values.update(updates)
        row = BusinessSettings(**values)
        db.add(row)
        logger.info("Created business settings from defaults")

    await db.commit()
    await db.refresh(row)
    return row
