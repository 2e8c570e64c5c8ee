class SeatBookingError(Exception):
    """Base class for seat booking domain errors."""


class OutOfBoundsError(SeatBookingError):
    def __init__(self, row: int, column: int) -> None:
        super().__init__(f"seat ({row}, {column}) is outside the grid")
        self.row = row
        self.column = column


class InvalidRowError(SeatBookingError):
    def __init__(self, row: int) -> None:
        super().__init__(f"row {row} is outside the grid")
        self.row = row


class CorruptDataError(SeatBookingError):
    """Persisted booking payload is not a JSON array of strings."""
