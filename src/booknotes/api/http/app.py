"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.responses import PlainTextResponse

from src.booknotes.api.http.app_data import ApplicationDependencies
from src.booknotes.api.http.deps import STATIC_DIR
from src.booknotes.api.http.routers.health import router as health_router
from src.booknotes.api.http.routers.service.book import router as book_router
from src.booknotes.api.utils.app_startup import configure_logging
from src.booknotes.core.errors import BooknotesError
from src.booknotes.core.services import DbSessionService
from src.booknotes.runtime.context import get_config

# Initialize logging
configure_logging()


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Booknotes",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None if get_config().app.environment == "production" else "/openapi.json",
)

# expose startup for tests
__all__ = ["app", "startup", "shutdown"]


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return PlainTextResponse(
                "Internal Server Error",
                status_code=500,
                headers={"X-Request-ID": request_id},
            )


# --- Error handlers ---
async def booknotes_error_handler(request: Request, exc: BooknotesError) -> PlainTextResponse:
    """Render application errors as plain text with their mapped status code."""
    if exc.status_code >= 500:
        logger.bind(error_type=type(exc).__name__).error("request.store_error: {}", exc.message)
    else:
        logger.bind(error_type=type(exc).__name__).info("request.rejected: {}", exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    logger.bind(errors=exc.errors()).warning("request.validation_error")
    return PlainTextResponse("Invalid request", status_code=400)


app.add_exception_handler(BooknotesError, booknotes_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)


# --- Router registration ---
app.include_router(health_router)
app.include_router(book_router)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    # Tests may install their own dependencies before the app starts
    if getattr(app.state, "app_dependencies", None) is None:
        app.state.app_dependencies = ApplicationDependencies(
            database_service=DbSessionService(),
        )

    logger.info("Server running on {}", config.app.base_url)


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
