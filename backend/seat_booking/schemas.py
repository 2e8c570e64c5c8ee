from typing import Optional

from pydantic import BaseModel, Field

from .domain import grid as seat_grid
from .domain.grid import MAX_SEATS_PER_BOOKING, Grid, Seat
from .domain.services import BookingQuote, RejectionReason
from .models import PriceTier, SeatStatus


class SeatRead(BaseModel):
    id: str
    row: int
    column: int
    label: str
    status: SeatStatus
    tier: PriceTier
    price: int

    @classmethod
    def from_domain(cls, *, seat: Seat) -> "SeatRead":
        return cls(
            id=seat.id,
            row=seat.row,
            column=seat.column,
            label=f"{seat.row_label}{seat.column + 1}",
            status=seat.status,
            tier=seat.price_tier,
            price=seat.price_tier.price,
        )


class SeatRowRead(BaseModel):
    row: int
    label: str
    seats: list[SeatRead]


class SeatMapRead(BaseModel):
    rows: list[SeatRowRead]
    available: int
    selected: int
    booked: int
    total_price: int
    max_seats_per_booking: int = MAX_SEATS_PER_BOOKING

    @classmethod
    def from_domain(cls, *, grid: Grid) -> "SeatMapRead":
        summary = seat_grid.summarize(grid)
        return cls(
            rows=[
                SeatRowRead(
                    row=index,
                    label=row[0].row_label,
                    seats=[SeatRead.from_domain(seat=seat) for seat in row],
                )
                for index, row in enumerate(grid.rows)
            ],
            available=summary.available,
            selected=summary.selected,
            booked=summary.booked,
            total_price=summary.total_price,
        )


class ToggleRead(BaseModel):
    accepted: bool
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None
    seat_map: SeatMapRead


class BookingQuoteRead(BaseModel):
    count: int
    total_price: int
    seat_ids: list[str]
    prompt: str

    @classmethod
    def from_domain(cls, *, quote: BookingQuote, prompt: str) -> "BookingQuoteRead":
        return cls(
            count=quote.count,
            total_price=quote.total_price,
            seat_ids=list(quote.seat_ids),
            prompt=prompt,
        )


class BookingConfirm(BaseModel):
    count: int = Field(ge=1, le=MAX_SEATS_PER_BOOKING)
    total_price: int = Field(ge=0)


class BookingRead(BaseModel):
    count: int
    total_price: int
    seat_ids: list[str]
    persisted: bool
    seat_map: SeatMapRead


class ResetConfirm(BaseModel):
    confirm: bool = False


class ResetRead(BaseModel):
    cleared_storage: bool
    seat_map: SeatMapRead
