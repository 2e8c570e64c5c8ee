import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import FastAPI, Request, Response

from .config import get_settings
from .database import async_session, init_models
from .deps import SeatMapState
from .domain import grid as seat_grid
from .domain.booking_store import BookingStore
from .domain.repositories import KeyValueStore
from .infrastructure.repositories import SqlAlchemyKeyValueStore
from .models import SeatStatus
from .routers import seats
from .usecases import seats as seat_usecase
from .utils.request_id import REQUEST_ID_HEADER, request_id_scope, resolve_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
    with request_id_scope(request_id):
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def create_app(kv: Optional[KeyValueStore] = None) -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if kv is None:
            await init_models()
        grid = await seat_usecase.load_seat_map(app.state.booking_store)
        app.state.seat_map.grid = grid
        logger.info("seat map loaded with %d booked seats", seat_grid.count_by_status(grid, SeatStatus.BOOKED))
        yield

    app = FastAPI(title="Seat Booking API", lifespan=lifespan)
    app.state.seat_map = SeatMapState()
    app.state.booking_store = BookingStore(
        kv if kv is not None else SqlAlchemyKeyValueStore(async_session),
        key=settings.storage_key,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.middleware("http")(request_id_middleware)
    app.include_router(seats.router)
    return app


app = create_app()
