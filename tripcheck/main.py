# tripcheck/main.py

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tripcheck.api.v1 import routes_health, routes_places, routes_routing, routes_trips
from tripcheck.core.config import settings
from tripcheck.core.errors import (
    InvalidInput,
    NoRouteFound,
    PersistenceFailure,
    ServiceUnavailable,
    TripCheckError,
)
from tripcheck.core.logger import logger
from tripcheck.services.address_resolver import AddressResolver
from tripcheck.services.route_client import RouteServiceClient

# Error class -> HTTP status. First match wins, so subclasses go first.
ERROR_STATUS = (
    (InvalidInput, 422),
    (NoRouteFound, 404),
    (ServiceUnavailable, 503),
    (PersistenceFailure, 502),
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # One connection pool shared by every external service client
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_S) as http_client:
        app.state.http_client = http_client
        app.state.resolver = AddressResolver(http_client)
        app.state.route_client = RouteServiceClient(http_client)
        logger.info("Service clients ready (Mapbox base URL {})", settings.MAPBOX_BASE_URL)
        yield
    logger.info("Service clients closed.")


async def handle_trip_error(request: Request, exc: TripCheckError) -> JSONResponse:
    status_code = 500
    for error_class, code in ERROR_STATUS:
        if isinstance(exc, error_class):
            status_code = code
            break
    logger.info("{} {} -> {} ({})", request.method, request.url.path, status_code, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Address suggestions, driving routes and trip profitability.",
        lifespan=lifespan,
    )

    # Routers
    app.include_router(routes_health.router, prefix="", tags=["health"])
    app.include_router(routes_places.router, prefix="", tags=["places"])
    app.include_router(routes_routing.router, prefix="", tags=["routing"])
    app.include_router(routes_trips.router, prefix="", tags=["trips"])

    app.add_exception_handler(TripCheckError, handle_trip_error)

    return app


app = create_app()
