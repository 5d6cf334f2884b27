import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv()

from dautracker import __version__
from dautracker.api import dau, health, metrics
from dautracker.core.config import settings, validate_config
from dautracker.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_handler,
    unhandled_exception_handler,
)
from dautracker.core.logging import configure_logging
from dautracker.core.middleware.metrics import MetricsMiddleware
from dautracker.core.middleware.request_id import RequestIdMiddleware
from dautracker.core.redis_client import reset_redis
from dautracker.core.validation import validate_env
from dautracker.features.activity.service import reset_tracker

configure_logging(settings.ENV)
validate_env()
validate_config(strict=settings.CONFIG_STRICT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("dautracker")
    logger.info(f"DAU tracker started: http://{settings.HOST}:{settings.PORT}")
    try:
        yield
    finally:
        reset_tracker()
        reset_redis()
        logger.info("DAU tracker stopped")


app = FastAPI(title="DAU Tracker", version=__version__, lifespan=lifespan)

# Middlewares
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(dau.router)
app.include_router(health.router)
app.include_router(metrics.router)
