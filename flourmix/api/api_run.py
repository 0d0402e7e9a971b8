from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from typing import Optional
import logging

from flourmix.api.routes import blends, materials
from flourmix.events.web_observers import start as start_event_observers, get_events as get_web_events
from flourmix.utilities.errors import (
    BlendNotFoundError,
    DataAcquisitionError,
    EmptyCombinationError,
    InvalidPercentageSumError,
    MixLimitExceededError
)

# Logging
logger = logging.getLogger("flourmix_app")

# Initialize FastAPI app
app = FastAPI(title="Flour Mix Composition & Blending API")

# Include routers
app.include_router(materials.router)
app.include_router(blends.router)


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for web polling when the app starts."""
    start_event_observers()
    logger.info("Web observers for blend events started")


# -------------------- Error mapping --------------------
@app.exception_handler(InvalidPercentageSumError)
async def _invalid_sum(request: Request, exc: InvalidPercentageSumError):
    return JSONResponse(status_code=400, content={
        'detail': str(exc), 'total_percentage': exc.total_percentage
    })


@app.exception_handler(EmptyCombinationError)
async def _empty_combination(request: Request, exc: EmptyCombinationError):
    return JSONResponse(status_code=400, content={'detail': str(exc)})


@app.exception_handler(MixLimitExceededError)
async def _limit_exceeded(request: Request, exc: MixLimitExceededError):
    return JSONResponse(status_code=403, content={
        'detail': str(exc), 'tier': exc.tier, 'limit': exc.limit
    })


@app.exception_handler(BlendNotFoundError)
async def _not_found(request: Request, exc: BlendNotFoundError):
    return JSONResponse(status_code=404, content={'detail': f"Blend not found: {exc.args[0] if exc.args else ''}"})


@app.exception_handler(DataAcquisitionError)
async def _data_unavailable(request: Request, exc: DataAcquisitionError):
    logger.error(f"Data acquisition failed for {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={'detail': 'Catalog data is temporarily unavailable'})


# -------------------- API: Events --------------------
@app.get('/api/events')
def api_events(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent blend events (saved, rejected for an invalid sum, combined).

    Client polling strategy:
        1. First call without 'since' to load the current backlog.
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/events?since=<next_cursor>
    """
    return get_web_events(since)
