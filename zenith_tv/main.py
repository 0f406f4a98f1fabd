from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from zenith_tv.config import setup_logging
from zenith_tv.dependencies import get_browser
from zenith_tv.services.ingest_service import IngestionError

from zenith_tv.routers import main_router


setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting Zenith TV...")

    browser = get_browser()

    # Preferences are restored before any catalog exists
    logger.info("Restoring preferences...")
    browser.restore_preferences()

    logger.info("Loading channel catalog...")
    try:
        await browser.refresh()
        logger.info("Channel catalog loaded: %s channels", len(browser.catalog))
    except IngestionError as e:
        logger.error(f"Initial catalog load failed, waiting for manual refresh: {e}")

    logger.info("Zenith TV started successfully")

    yield

    logger.info("Zenith TV stopped")


app = FastAPI(
    title="Zenith TV",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(main_router)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors with details"""
    logger.error(f"Validation error for {request.method} {request.url.path}")
    logger.error(f"Validation details: {exc.errors()}")

    errors = []
    for error in exc.errors():
        error_dict = {
            "type": error.get("type"),
            "loc": error.get("loc"),
            "msg": error.get("msg"),
            "input": str(error.get("input", ""))[:100]
        }
        errors.append(error_dict)

    return JSONResponse(
        status_code=422,
        content={
            "detail": errors
        }
    )
