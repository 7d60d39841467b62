from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dvbviewer_tv.config import get_settings, setup_logging
from dvbviewer_tv.dependencies import configure_services, get_service_locator
from dvbviewer_tv.errors import (
    RecordingServiceError,
    RecordingServiceUnavailableError,
    ResourceNotFoundError,
)
from dvbviewer_tv.routers import main_router
from dvbviewer_tv.schemas import ErrorDetail, StandardErrorResponse
from dvbviewer_tv.services.backend_proxy import BackendProxy
from dvbviewer_tv.utils.logging_helpers import log_backend_fault, log_section_end, log_section_start


setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    log_section_start(logger, "DVBViewer Live TV Service startup")

    try:
        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level)
        service = configure_services(settings)
        logger.info("Live TV provider ready: %s", service.name)

        validation = settings.validate_configuration()
        if not validation.is_valid:
            logger.warning("Configuration incomplete: %s", validation.message)
    except Exception as e:
        logger.error(f"Failed to start DVBViewer Live TV Service: {e}", exc_info=True)
        raise

    log_section_end(logger, "DVBViewer Live TV Service startup")

    yield

    log_section_start(logger, "DVBViewer Live TV Service shutdown")

    locator = get_service_locator()
    if locator.is_registered(BackendProxy):
        try:
            await locator.get(BackendProxy).aclose()
        except Exception as e:
            logger.error(f"Error closing Recording Service proxy: {e}", exc_info=True)

    log_section_end(logger, "DVBViewer Live TV Service shutdown")


app = FastAPI(
    title="DVBViewer Live TV Service",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(main_router)


def _error_response(status_code: int, code: str, message: str, context: dict | None = None) -> JSONResponse:
    body = StandardErrorResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        error=ErrorDetail(code=code, message=message, context=context),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(NotImplementedError)
async def not_implemented_handler(request: Request, exc: NotImplementedError):
    """Unsupported operations are a fixed capability gap"""
    logger.info(f"Unsupported operation {request.method} {request.url.path}: {exc}")
    return _error_response(501, "NOT_IMPLEMENTED", str(exc) or "Not implemented")


@app.exception_handler(RecordingServiceError)
async def recording_service_error_handler(request: Request, exc: RecordingServiceError):
    """Map backend faults to HTTP status codes without retrying"""
    log_backend_fault(logger, f"{request.method} {request.url.path}", exc)

    if isinstance(exc, ResourceNotFoundError):
        return _error_response(404, "NOT_FOUND", str(exc))
    if isinstance(exc, RecordingServiceUnavailableError):
        return _error_response(503, "BACKEND_UNAVAILABLE", str(exc))
    return _error_response(502, "BACKEND_ERROR", str(exc))


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
