"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventhub.config import settings
from eventhub.database import Base, engine
from eventhub.errors import (
    ConstraintViolation,
    EngineError,
    IneligibleReview,
    InvalidTimeRange,
    NotFound,
    Unauthorized,
    ValidationError,
)

# Import routers
from eventhub.routers import events, profiles, reviews, stats

# Import all models so Base.metadata knows about them
import eventhub.models  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Community Events",
    description="Events, RSVPs and post-event reviews with per-identity access rules",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Most specific first; the lookup walks this list in order.
_STATUS_CODES = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidTimeRange, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (ConstraintViolation, status.HTTP_409_CONFLICT),
    (IneligibleReview, status.HTTP_409_CONFLICT),
]


def status_for(exc: EngineError) -> int:
    for error_type, code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    code = status_for(exc)
    logger.info("%s %s -> %d %s", request.method, request.url.path, code, exc.code)
    return JSONResponse(status_code=code, content=exc.to_response().model_dump())


# Register routers
app.include_router(profiles.router, prefix="/api/profiles", tags=["Profiles"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(reviews.router, prefix="/api/reviews", tags=["Reviews"])
app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
