import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from config import Settings
from database import create_engine, create_session_factory, get_session, init_db
from errors import BookingError, StorageError
from notifier import Notifier
from schemas import BookingCreate, BookingCreated, BookingDeleted, BookingRead
from service import BookingService
from store import BookingStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_booking_service(
    session: AsyncSession = Depends(get_session),
    notifier: Notifier = Depends(get_notifier),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(BookingStore(session), notifier)


def create_app(settings: Optional[Settings] = None, notifier: Optional[Notifier] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        engine = create_engine(settings)
        await init_db(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)

        app.state.notifier = notifier or Notifier.from_settings(settings)
        if notifier is None:
            # smtplib blocks, keep the login check off the event loop
            await run_in_threadpool(app.state.notifier.verify)

        yield

        logger.info("Application shutting down...")
        await engine.dispose()

    app = FastAPI(title="Bus Booking System", lifespan=lifespan)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": exc.message},
        )

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        # Validation failures and duplicate identities
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning(f"Malformed request to {request.url.path}: {detail}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": f"Ogiltig förfrågan: {detail}"},
        )

    # --- GET /api/bookings ---
    @app.get("/api/bookings", response_model=List[BookingRead])
    async def list_bookings(service: BookingService = Depends(get_booking_service)):
        bookings = await service.list_bookings()
        return [BookingRead.from_model(b) for b in bookings]

    # --- POST /api/bookings ---
    @app.post(
        "/api/bookings",
        response_model=BookingCreated,
        responses={400: {"description": "Invalid or duplicate booking"}},
    )
    async def create_booking(
        booking_data: BookingCreate,
        background_tasks: BackgroundTasks,
        service: BookingService = Depends(get_booking_service),
    ):
        booking_id = await service.create_booking(booking_data, background_tasks)
        return BookingCreated(id=booking_id)

    # --- DELETE /api/bookings/{booking_id} ---
    @app.delete("/api/bookings/{booking_id}", response_model=BookingDeleted)
    async def delete_booking(
        booking_id: int,
        background_tasks: BackgroundTasks,
        service: BookingService = Depends(get_booking_service),
    ):
        deleted = await service.delete_booking(booking_id, background_tasks)
        return BookingDeleted(deleted=deleted)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Settings.from_env().port)
