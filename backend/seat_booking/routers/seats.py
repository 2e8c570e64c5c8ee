from fastapi import APIRouter, Depends, HTTPException, Path, status

from ..deps import HttpConfirmation, SeatMapState, get_booking_store, get_seat_map_state
from ..domain import services as policy
from ..domain.booking_store import BookingStore
from ..domain.errors import OutOfBoundsError
from ..domain.services import RejectionReason
from ..schemas import (
    BookingConfirm,
    BookingQuoteRead,
    BookingRead,
    ResetConfirm,
    ResetRead,
    SeatMapRead,
    ToggleRead,
)
from ..usecases import seats as seat_usecase

router = APIRouter(prefix="", tags=["seats"])


@router.get("/seats", response_model=SeatMapRead)
async def get_seat_map(state: SeatMapState = Depends(get_seat_map_state)) -> SeatMapRead:
    return SeatMapRead.from_domain(grid=state.grid)


@router.post("/seats/{row}/{column}/toggle", response_model=ToggleRead)
async def toggle_seat(
    row: int = Path(..., ge=0),
    column: int = Path(..., ge=0),
    state: SeatMapState = Depends(get_seat_map_state),
) -> ToggleRead:
    confirmation = HttpConfirmation()
    async with state.lock:
        try:
            result = seat_usecase.toggle_seat(state.grid, confirmation, row=row, col=column)
        except OutOfBoundsError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="seat not found")
        state.grid = result.grid

    return ToggleRead(
        accepted=result.accepted,
        reason=result.reason,
        message=confirmation.messages[0] if confirmation.messages else None,
        seat_map=SeatMapRead.from_domain(grid=result.grid),
    )


@router.get("/bookings/quote", response_model=BookingQuoteRead)
async def get_booking_quote(state: SeatMapState = Depends(get_seat_map_state)) -> BookingQuoteRead:
    quoted = policy.quote_booking(state.grid)
    if quoted.quote is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_rejection_detail(quoted.reason))
    quote = quoted.quote
    return BookingQuoteRead.from_domain(
        quote=quote,
        prompt=seat_usecase.booking_prompt(quote.count, quote.total_price),
    )


@router.post("/bookings", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def book_selected(
    payload: BookingConfirm,
    state: SeatMapState = Depends(get_seat_map_state),
    store: BookingStore = Depends(get_booking_store),
) -> BookingRead:
    confirmation = HttpConfirmation(expected_count=payload.count, expected_total=payload.total_price)
    async with state.lock:
        outcome = await seat_usecase.book_selected(store, state.grid, confirmation)
        state.grid = outcome.grid

    if outcome.reason is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_rejection_detail(outcome.reason))
    if not outcome.booked or outcome.quote is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="selection changed since quote")

    return BookingRead(
        count=outcome.quote.count,
        total_price=outcome.quote.total_price,
        seat_ids=list(outcome.quote.seat_ids),
        persisted=outcome.persisted,
        seat_map=SeatMapRead.from_domain(grid=outcome.grid),
    )


@router.post("/selection/clear", response_model=SeatMapRead)
async def clear_selection(state: SeatMapState = Depends(get_seat_map_state)) -> SeatMapRead:
    async with state.lock:
        state.grid = seat_usecase.clear_selection(state.grid)
        grid = state.grid
    return SeatMapRead.from_domain(grid=grid)


@router.post("/reset", response_model=ResetRead)
async def reset_seat_map(
    payload: ResetConfirm,
    state: SeatMapState = Depends(get_seat_map_state),
    store: BookingStore = Depends(get_booking_store),
) -> ResetRead:
    confirmation = HttpConfirmation(reset_confirmed=payload.confirm)
    async with state.lock:
        outcome = await seat_usecase.reset_seat_map(store, state.grid, confirmation)
        state.grid = outcome.grid

    if not outcome.reset:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=seat_usecase.RESET_PROMPT)
    return ResetRead(cleared_storage=outcome.cleared_storage, seat_map=SeatMapRead.from_domain(grid=outcome.grid))


def _rejection_detail(reason: RejectionReason | None) -> str:
    if reason == RejectionReason.NOTHING_SELECTED:
        return "nothing selected"
    if reason == RejectionReason.CAPACITY_EXCEEDED:
        return seat_usecase.CAPACITY_MESSAGE
    return "booking rejected"
