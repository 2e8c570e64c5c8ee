import random

import pytest
from seat_booking.domain import grid as seat_grid
from seat_booking.domain import services as policy
from seat_booking.domain.errors import OutOfBoundsError
from seat_booking.domain.grid import Grid
from seat_booking.domain.services import RejectionReason
from seat_booking.models import SeatStatus


def _select(grid: Grid, *seats: tuple[int, int]) -> Grid:
    for row, col in seats:
        result = policy.request_toggle(grid, row, col)
        assert result.accepted, (row, col, result.reason)
        grid = result.grid
    return grid


def test_toggle_selects_and_deselects() -> None:
    grid = seat_grid.initialize()
    selected = policy.request_toggle(grid, 0, 0)
    assert selected.accepted
    assert selected.grid.rows[0][0].status == SeatStatus.SELECTED

    cleared = policy.request_toggle(selected.grid, 0, 0)
    assert cleared.accepted
    assert cleared.grid == grid


def test_toggle_on_booked_seat_is_silent_rejection() -> None:
    grid = seat_grid.apply_status(seat_grid.initialize(), 2, 5, SeatStatus.BOOKED)
    result = policy.request_toggle(grid, 2, 5)
    assert result.reason == RejectionReason.SEAT_ALREADY_BOOKED
    assert result.grid is grid


def test_ninth_selection_is_rejected_for_capacity() -> None:
    grid = _select(seat_grid.initialize(), *[(0, col) for col in range(8)])
    assert seat_grid.count_by_status(grid, SeatStatus.SELECTED) == 8

    result = policy.request_toggle(grid, 5, 5)
    assert result.reason == RejectionReason.CAPACITY_EXCEEDED
    assert result.grid is grid


def test_deselect_is_allowed_at_capacity() -> None:
    grid = _select(seat_grid.initialize(), *[(0, col) for col in range(8)])
    result = policy.request_toggle(grid, 0, 7)
    assert result.accepted
    assert seat_grid.count_by_status(result.grid, SeatStatus.SELECTED) == 7


def test_filling_the_gap_between_two_selected_seats_is_accepted() -> None:
    grid = _select(seat_grid.initialize(), (3, 2), (3, 4))
    result = policy.request_toggle(grid, 3, 3)
    assert result.accepted
    assert [seat.status for seat in result.grid.rows[3][2:5]] == [SeatStatus.SELECTED] * 3


def test_deselecting_middle_seat_would_orphan_it() -> None:
    grid = _select(seat_grid.initialize(), (3, 2), (3, 4), (3, 3))
    result = policy.request_toggle(grid, 3, 3)
    assert result.reason == RejectionReason.WOULD_ORPHAN_SEAT
    assert result.grid is grid
    assert [seat.status for seat in grid.rows[3][2:5]] == [SeatStatus.SELECTED] * 3


def test_deselecting_next_to_booked_neighbour_would_orphan() -> None:
    grid = seat_grid.apply_status(seat_grid.initialize(), 6, 4, SeatStatus.BOOKED)
    grid = _select(grid, (6, 5), (6, 6))
    result = policy.request_toggle(grid, 6, 5)
    assert result.reason == RejectionReason.WOULD_ORPHAN_SEAT


def test_deselecting_end_of_a_run_is_accepted() -> None:
    grid = _select(seat_grid.initialize(), (3, 2), (3, 3), (3, 4))
    assert policy.request_toggle(grid, 3, 4).accepted


@pytest.mark.parametrize("col", [0, 9])
def test_edge_seats_are_exempt_from_continuity(col: int) -> None:
    neighbour = 1 if col == 0 else 8
    grid = _select(seat_grid.initialize(), (1, col), (1, neighbour))
    assert policy.request_toggle(grid, 1, col).accepted


def test_toggle_out_of_bounds_raises() -> None:
    with pytest.raises(OutOfBoundsError):
        policy.request_toggle(seat_grid.initialize(), 8, 0)


def test_quote_prices_selected_seats() -> None:
    grid = _select(seat_grid.initialize(), (0, 0), (7, 9))
    result = policy.quote_booking(grid)
    assert result.accepted
    assert result.quote is not None
    assert result.quote.count == 2
    assert result.quote.total_price == 1500
    assert result.quote.seat_ids == ("0-0", "7-9")


def test_quote_with_nothing_selected_is_rejected() -> None:
    result = policy.quote_booking(seat_grid.initialize())
    assert result.reason == RejectionReason.NOTHING_SELECTED
    assert result.quote is None


def test_quote_revalidates_capacity() -> None:
    grid = seat_grid.initialize()
    for col in range(9):
        grid = seat_grid.apply_status(grid, 4, col, SeatStatus.SELECTED)
    result = policy.quote_booking(grid)
    assert result.reason == RejectionReason.CAPACITY_EXCEEDED


def test_commit_promotes_only_selected_seats() -> None:
    grid = _select(seat_grid.initialize(), (0, 0), (0, 1))
    grid = seat_grid.apply_status(grid, 5, 5, SeatStatus.BOOKED)

    committed = policy.commit_booking(grid)

    assert seat_grid.to_booked_id_list(committed) == ["0-0", "0-1", "5-5"]
    assert seat_grid.count_by_status(committed, SeatStatus.SELECTED) == 0


def test_clear_selection_releases_selected_seats() -> None:
    grid = seat_grid.apply_status(seat_grid.initialize(), 1, 1, SeatStatus.BOOKED)
    grid = _select(grid, (2, 2), (2, 3))
    cleared = policy.clear_selection(grid)
    assert seat_grid.count_by_status(cleared, SeatStatus.SELECTED) == 0
    assert seat_grid.count_by_status(cleared, SeatStatus.BOOKED) == 1


def test_clear_selection_without_selection_is_noop() -> None:
    grid = seat_grid.apply_status(seat_grid.initialize(), 1, 1, SeatStatus.BOOKED)
    assert policy.clear_selection(grid) is grid


def test_reset_matches_fresh_grid() -> None:
    assert policy.reset() == seat_grid.initialize()


def test_random_toggle_sequences_keep_invariants() -> None:
    rng = random.Random(20240601)
    for _ in range(20):
        grid = seat_grid.initialize()
        for step in range(300):
            row, col = rng.randrange(seat_grid.ROWS), rng.randrange(seat_grid.SEATS_PER_ROW)
            before = grid.rows[row][col].status
            result = policy.request_toggle(grid, row, col)

            if result.accepted:
                assert not policy.would_orphan(result.grid, row, col)
            else:
                assert result.grid is grid
            if before == SeatStatus.BOOKED:
                assert result.grid.rows[row][col].status == SeatStatus.BOOKED
            grid = result.grid

            if step % 50 == 49 and rng.random() < 0.5:
                grid = policy.commit_booking(grid)

            summary = seat_grid.summarize(grid)
            assert summary.selected <= seat_grid.MAX_SEATS_PER_BOOKING
            assert summary.available + summary.selected + summary.booked == 80
            assert summary.total_price == sum(
                seat_grid.price_for_row(seat.row) for seat in seat_grid.selected_seats(grid)
            )
