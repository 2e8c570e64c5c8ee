from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..domain import grid as seat_grid
from ..domain import services as policy
from ..domain.booking_store import BookingStore
from ..domain.grid import MAX_SEATS_PER_BOOKING, Grid
from ..domain.services import BookingQuote, RejectionReason, ToggleResult
from ..models import SeatStatus
from ..utils.audit_log import emit_audit_log

CAPACITY_MESSAGE = f"You can book a maximum of {MAX_SEATS_PER_BOOKING} seats per transaction."
CONTINUITY_MESSAGE = "You cannot leave a single available seat between selected/booked seats."
RESET_PROMPT = "This will clear all bookings and reset all seats. Continue?"

# Rejections surfaced to the user; SEAT_ALREADY_BOOKED stays silent.
REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.CAPACITY_EXCEEDED: CAPACITY_MESSAGE,
    RejectionReason.WOULD_ORPHAN_SEAT: CONTINUITY_MESSAGE,
}


def booking_prompt(count: int, total_price: int) -> str:
    return f"You are about to book {count} seat(s) for a total of ₹{total_price}.\nDo you want to proceed?"


class Confirmation(Protocol):
    def confirm_booking(self, count: int, total_price: int) -> bool: ...

    def confirm_reset(self) -> bool: ...

    def notify(self, message: str) -> None: ...


@dataclass(frozen=True)
class BookingOutcome:
    grid: Grid
    quote: Optional[BookingQuote] = None
    reason: Optional[RejectionReason] = None
    booked: bool = False
    persisted: bool = False


@dataclass(frozen=True)
class ResetOutcome:
    grid: Grid
    reset: bool = False
    cleared_storage: bool = False


async def load_seat_map(store: BookingStore) -> Grid:
    booked_ids = await store.load()
    return seat_grid.merge_booked_ids(seat_grid.initialize(), booked_ids)


def toggle_seat(grid: Grid, confirmation: Confirmation, *, row: int, col: int) -> ToggleResult:
    result = policy.request_toggle(grid, row, col)
    if result.reason in REJECTION_MESSAGES:
        confirmation.notify(REJECTION_MESSAGES[result.reason])
    return result


async def book_selected(store: BookingStore, grid: Grid, confirmation: Confirmation) -> BookingOutcome:
    quoted = policy.quote_booking(grid)
    if quoted.quote is None:
        if quoted.reason in REJECTION_MESSAGES:
            confirmation.notify(REJECTION_MESSAGES[quoted.reason])
        return BookingOutcome(grid=grid, reason=quoted.reason)

    quote = quoted.quote
    if not confirmation.confirm_booking(quote.count, quote.total_price):
        return BookingOutcome(grid=grid, quote=quote)

    updated = policy.commit_booking(grid)
    persisted = await store.save(updated)
    emit_audit_log(
        action="seats.booked",
        initiator="user",
        seat_ids=quote.seat_ids,
        count=quote.count,
        total_price=quote.total_price,
        booked_total=seat_grid.count_by_status(updated, SeatStatus.BOOKED),
        persisted=persisted,
    )
    return BookingOutcome(grid=updated, quote=quote, booked=True, persisted=persisted)


def clear_selection(grid: Grid) -> Grid:
    updated = policy.clear_selection(grid)
    if updated is not grid:
        emit_audit_log(
            action="selection.cleared",
            initiator="user",
            count=seat_grid.count_by_status(grid, SeatStatus.SELECTED),
        )
    return updated


async def reset_seat_map(store: BookingStore, grid: Grid, confirmation: Confirmation) -> ResetOutcome:
    if not confirmation.confirm_reset():
        return ResetOutcome(grid=grid)
    fresh = policy.reset()
    cleared = await store.clear()
    emit_audit_log(
        action="seats.reset",
        initiator="user",
        booked_total=seat_grid.count_by_status(grid, SeatStatus.BOOKED),
        persisted=cleared,
    )
    return ResetOutcome(grid=fresh, reset=True, cleared_storage=cleared)
