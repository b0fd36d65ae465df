"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.v1.attachments import router as attachments_router
from src.api.v1.calculator import router as calculator_router
from src.api.v1.callbacks import router as callbacks_router
from src.config import settings
from src.dependencies import close_storage, init_storage
from src.errors import CallbackDeskError

VERSION = "0.1.0"

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    await init_storage()
    logger.info(
        "app_starting",
        environment=settings.environment,
        storage=settings.storage_backend,
        data_dir=str(settings.data_dir),
    )
    yield
    await close_storage()
    logger.info("app_shutting_down")


app = FastAPI(
    title="Callback Desk API",
    description="Callback requests, admin triage and price calculator for a business site",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(CallbackDeskError)
async def handle_domain_error(request: Request, exc: CallbackDeskError):
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "request_failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid request")
    logger.warning("request_invalid", path=request.url.path, errors=len(errors), field=field)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": f"{field}: {message}" if field else message},
    )


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception):
    logger.exception("request_crashed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


app.include_router(callbacks_router)
app.include_router(calculator_router)
app.include_router(attachments_router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": VERSION}


def run() -> None:
    """Serve the app on the configured port."""
    uvicorn.run("src.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
