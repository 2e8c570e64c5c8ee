from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Sequence

from ..models import SeatStatus
from . import grid as seat_grid
from .grid import MAX_SEATS_PER_BOOKING, Grid, Seat

_BLOCKING = frozenset({SeatStatus.SELECTED, SeatStatus.BOOKED})


class RejectionReason(StrEnum):
    SEAT_ALREADY_BOOKED = "seat_already_booked"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    WOULD_ORPHAN_SEAT = "would_orphan_seat"
    NOTHING_SELECTED = "nothing_selected"


@dataclass(frozen=True)
class ToggleResult:
    grid: Grid
    reason: Optional[RejectionReason] = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class BookingQuote:
    count: int
    total_price: int
    seat_ids: tuple[str, ...]


@dataclass(frozen=True)
class QuoteResult:
    quote: Optional[BookingQuote] = None
    reason: Optional[RejectionReason] = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


def request_toggle(grid: Grid, row: int, column: int) -> ToggleResult:
    """
    Pure validation of a single-seat toggle against the current snapshot.
    Rejections carry the original grid untouched; out-of-range coordinates raise OutOfBoundsError.
    """
    current = seat_grid.seat_at(grid, row, column)
    if current.status == SeatStatus.BOOKED:
        return ToggleResult(grid=grid, reason=RejectionReason.SEAT_ALREADY_BOOKED)

    if current.status == SeatStatus.AVAILABLE:
        target = SeatStatus.SELECTED
        if seat_grid.count_by_status(grid, SeatStatus.SELECTED) >= MAX_SEATS_PER_BOOKING:
            return ToggleResult(grid=grid, reason=RejectionReason.CAPACITY_EXCEEDED)
    else:
        target = SeatStatus.AVAILABLE

    candidate = seat_grid.apply_status(grid, row, column, target)
    if would_orphan(candidate, row, column):
        return ToggleResult(grid=grid, reason=RejectionReason.WOULD_ORPHAN_SEAT)
    return ToggleResult(grid=candidate)


def would_orphan(grid: Grid, row: int, column: int) -> bool:
    """True when the seat is Available and both row neighbours are Selected or Booked."""
    if column == 0 or column == seat_grid.SEATS_PER_ROW - 1:
        return False
    seats = grid.rows[row]
    return (
        seats[column].status == SeatStatus.AVAILABLE
        and seats[column - 1].status in _BLOCKING
        and seats[column + 1].status in _BLOCKING
    )


def quote_booking(grid: Grid, selected: Optional[Sequence[Seat]] = None) -> QuoteResult:
    """
    Price the current selection for confirmation.
    Capacity is re-validated here independently of the toggle path.
    """
    if selected is None:
        selected = seat_grid.selected_seats(grid)
    if not selected:
        return QuoteResult(reason=RejectionReason.NOTHING_SELECTED)
    if len(selected) > MAX_SEATS_PER_BOOKING:
        return QuoteResult(reason=RejectionReason.CAPACITY_EXCEEDED)
    return QuoteResult(
        quote=BookingQuote(
            count=len(selected),
            total_price=sum(seat_grid.price_for_row(seat.row) for seat in selected),
            seat_ids=tuple(seat.id for seat in selected),
        )
    )


def commit_booking(grid: Grid) -> Grid:
    # Only seats still Selected are promoted; anything else stays as it is.
    return seat_grid.transition_all(grid, SeatStatus.SELECTED, SeatStatus.BOOKED)


def clear_selection(grid: Grid) -> Grid:
    return seat_grid.transition_all(grid, SeatStatus.SELECTED, SeatStatus.AVAILABLE)


def reset() -> Grid:
    return seat_grid.initialize()
