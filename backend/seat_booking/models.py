from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.sqltypes import DateTime, String, Text


class Base(DeclarativeBase):
    pass


class SeatStatus(StrEnum):
    AVAILABLE = "available"
    SELECTED = "selected"
    BOOKED = "booked"


class PriceTier(StrEnum):
    PREMIUM = "premium"
    STANDARD = "standard"
    ECONOMY = "economy"

    @property
    def price(self) -> int:
        return TIER_PRICES[self]


TIER_PRICES: dict[PriceTier, int] = {
    PriceTier.PREMIUM: 1000,
    PriceTier.STANDARD: 750,
    PriceTier.ECONOMY: 500,
}


class KeyValueEntry(Base):
    __tablename__ = "key_values"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
