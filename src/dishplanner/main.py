"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dishplanner.config import get_settings
from dishplanner.dependencies import get_catalog
from dishplanner.errors import (
    CatalogError,
    EmptyCatalogError,
    NoEligibleRecipesError,
    PlannerError,
    RecipeNotFoundError,
    ValidationError,
)
from dishplanner.logging_config import LoggingContext, configure_logging, get_logger
from dishplanner.routers import (
    combinations_router,
    meal_plans_router,
    recipes_router,
    shopping_lists_router,
)

# Configure logging on module load
configure_logging()
logger = get_logger(__name__)

ERROR_STATUS: dict[type[PlannerError], int] = {
    ValidationError: 400,
    RecipeNotFoundError: 404,
    NoEligibleRecipesError: 422,
    EmptyCatalogError: 503,
    CatalogError: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Dishplanner API")

    try:
        catalog = get_catalog()
        logger.info(f"Recipe catalog ready with {len(catalog)} recipes")
    except CatalogError as e:
        logger.warning(f"Recipe catalog unavailable: {e}")

    yield

    logger.info("Shutting down Dishplanner API")


app = FastAPI(
    title="Dishplanner API",
    description="Meal plans, dish combinations and shopping lists from a recipe catalog",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag every log line of a request with its request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:16]
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    """Render domain errors as {"success": false, "error", "details", "hint"}."""
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.warning(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.details}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


# Include routers
app.include_router(recipes_router)
app.include_router(meal_plans_router)
app.include_router(combinations_router)
app.include_router(shopping_lists_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "dishplanner-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Dishplanner API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
