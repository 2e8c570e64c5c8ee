from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request

from .domain import grid as seat_grid
from .domain.booking_store import BookingStore
from .domain.grid import Grid


@dataclass
class SeatMapState:
    """Current snapshot held by the HTTP layer; updates go through `lock`."""

    grid: Grid = field(default_factory=seat_grid.initialize)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class HttpConfirmation:
    """
    Confirmation collaborator for request/response clients.
    The client has already shown the prompt, so a booking is confirmed only when
    the figures it confirmed match the current quote.
    """

    def __init__(
        self,
        *,
        expected_count: Optional[int] = None,
        expected_total: Optional[int] = None,
        reset_confirmed: bool = False,
    ) -> None:
        self.expected_count = expected_count
        self.expected_total = expected_total
        self.reset_confirmed = reset_confirmed
        self.messages: list[str] = []

    def confirm_booking(self, count: int, total_price: int) -> bool:
        return count == self.expected_count and total_price == self.expected_total

    def confirm_reset(self) -> bool:
        return self.reset_confirmed

    def notify(self, message: str) -> None:
        self.messages.append(message)


def get_seat_map_state(request: Request) -> SeatMapState:
    return request.app.state.seat_map


def get_booking_store(request: Request) -> BookingStore:
    return request.app.state.booking_store
