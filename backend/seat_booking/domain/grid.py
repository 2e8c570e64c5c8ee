from __future__ import annotations

from dataclasses import dataclass, replace
from typing import AbstractSet, Callable, Iterator

from ..models import PriceTier, SeatStatus
from .errors import InvalidRowError, OutOfBoundsError

ROWS = 8
SEATS_PER_ROW = 10
MAX_SEATS_PER_BOOKING = 8

# Last row index (inclusive) of each tier, in row order.
_TIER_BOUNDARIES: tuple[tuple[int, PriceTier], ...] = (
    (2, PriceTier.PREMIUM),
    (5, PriceTier.STANDARD),
    (ROWS - 1, PriceTier.ECONOMY),
)


@dataclass(frozen=True)
class Seat:
    row: int
    column: int
    status: SeatStatus = SeatStatus.AVAILABLE

    @property
    def id(self) -> str:
        return seat_id(self.row, self.column)

    @property
    def price_tier(self) -> PriceTier:
        return tier_for_row(self.row)

    @property
    def row_label(self) -> str:
        return chr(ord("A") + self.row)


@dataclass(frozen=True)
class Grid:
    """Immutable snapshot of every seat, rows in display order."""

    rows: tuple[tuple[Seat, ...], ...]

    def seats(self) -> Iterator[Seat]:
        for row in self.rows:
            yield from row


@dataclass(frozen=True)
class GridSummary:
    available: int
    selected: int
    booked: int
    total_price: int


def seat_id(row: int, column: int) -> str:
    return f"{row}-{column}"


def initialize() -> Grid:
    return Grid(
        rows=tuple(
            tuple(Seat(row=row, column=column) for column in range(SEATS_PER_ROW))
            for row in range(ROWS)
        )
    )


def tier_for_row(row: int) -> PriceTier:
    if not 0 <= row < ROWS:
        raise InvalidRowError(row)
    for last_row, tier in _TIER_BOUNDARIES:
        if row <= last_row:
            return tier
    raise InvalidRowError(row)  # pragma: no cover - boundaries cover every row


def price_for_row(row: int) -> int:
    return tier_for_row(row).price


def in_bounds(row: int, column: int) -> bool:
    return 0 <= row < ROWS and 0 <= column < SEATS_PER_ROW


def seat_at(grid: Grid, row: int, column: int) -> Seat:
    if not in_bounds(row, column):
        raise OutOfBoundsError(row, column)
    return grid.rows[row][column]


def count_by_status(grid: Grid, status: SeatStatus) -> int:
    return sum(1 for seat in grid.seats() if seat.status == status)


def selected_seats(grid: Grid) -> list[Seat]:
    return [seat for seat in grid.seats() if seat.status == SeatStatus.SELECTED]


def total_price(grid: Grid) -> int:
    return sum(price_for_row(seat.row) for seat in selected_seats(grid))


def summarize(grid: Grid) -> GridSummary:
    return GridSummary(
        available=count_by_status(grid, SeatStatus.AVAILABLE),
        selected=count_by_status(grid, SeatStatus.SELECTED),
        booked=count_by_status(grid, SeatStatus.BOOKED),
        total_price=total_price(grid),
    )


def apply_status(grid: Grid, row: int, column: int, new_status: SeatStatus) -> Grid:
    """
    Return a new snapshot with one seat's status replaced.
    No policy checks happen here; untouched rows are shared with `grid`.
    A value outside SeatStatus raises ValueError.
    """
    new_status = SeatStatus(new_status)
    current = seat_at(grid, row, column)
    if current.status == new_status:
        return grid
    seats = list(grid.rows[row])
    seats[column] = replace(current, status=new_status)
    rows = list(grid.rows)
    rows[row] = tuple(seats)
    return Grid(rows=tuple(rows))


def to_booked_id_list(grid: Grid) -> list[str]:
    return [seat.id for seat in grid.seats() if seat.status == SeatStatus.BOOKED]


def merge_booked_ids(grid: Grid, ids: AbstractSet[str]) -> Grid:
    """Mark Available seats listed in `ids` as Booked. Unknown ids are ignored."""
    return _map_statuses(
        grid,
        lambda seat: SeatStatus.BOOKED if seat.id in ids else seat.status,
        SeatStatus.AVAILABLE,
    )


def transition_all(grid: Grid, from_status: SeatStatus, to_status: SeatStatus) -> Grid:
    to_status = SeatStatus(to_status)
    return _map_statuses(grid, lambda _seat: to_status, from_status)


def _map_statuses(grid: Grid, new_status_of: Callable[[Seat], SeatStatus], only: SeatStatus) -> Grid:
    changed = False
    rows: list[tuple[Seat, ...]] = []
    for row in grid.rows:
        seats: list[Seat] = []
        row_changed = False
        for seat in row:
            status = new_status_of(seat) if seat.status == only else seat.status
            if status != seat.status:
                seat = replace(seat, status=status)
                row_changed = True
            seats.append(seat)
        rows.append(tuple(seats) if row_changed else row)
        changed = changed or row_changed
    return Grid(rows=tuple(rows)) if changed else grid
