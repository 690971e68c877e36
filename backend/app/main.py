import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from backend.app.api.v1 import router as api_v1_router
from backend.app.config import get_settings
from backend.app.domains.versioning.errors import VersioningError, VersioningErrorCode
from backend.app.infrastructure.database import check_database_connectivity
from backend.app.infrastructure.errors import InvalidRequestError, UnexpectedServerError
from backend.app.infrastructure.redis import check_redis_connectivity, close_redis_client
from backend.app.logging_config import (
    clear_context,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)

try:
    settings = get_settings()
except ValidationError as e:
    missing_fields = [err["loc"][0] for err in e.errors() if err["type"] == "missing"]
    if missing_fields:
        raise SystemExit(
            f"Missing required environment variables: {', '.join(str(f).upper() for f in missing_fields)}. "
            f"Please check your .env file or environment configuration."
        ) from e
    raise

setup_logging(settings.log_dir)
logger = get_logger("app.main")

CORRELATION_HEADER = "X-Correlation-ID"

ERROR_STATUS_CODES: dict[VersioningErrorCode, int] = {
    VersioningErrorCode.DOCUMENT_NOT_FOUND: 404,
    VersioningErrorCode.USER_NOT_FOUND: 404,
    VersioningErrorCode.VERSION_NOT_FOUND: 404,
    VersioningErrorCode.VERSION_CONFLICT: 409,
    VersioningErrorCode.VERSION_IMMUTABLE: 409,
    VersioningErrorCode.VALIDATION_FAILED: 422,
}


async def verify_infrastructure() -> dict:
    logger.info("Starting infrastructure connectivity verification")
    db_status = await check_database_connectivity()
    redis_status = check_redis_connectivity(settings.redis_url)

    results = {
        "database": db_status,
        "redis": redis_status,
    }

    all_healthy = all(results.values())
    if all_healthy:
        logger.info("All infrastructure connectivity checks passed")
    else:
        failed = [k for k, v in results.items() if not v]
        logger.warning(f"Infrastructure connectivity checks failed for: {', '.join(failed)}")

    return results


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Document Versioning Service in {settings.app_env} environment")
    connectivity = await verify_infrastructure()
    app.state.infrastructure_status = connectivity
    yield
    close_redis_client()
    logger.info("Shutting down Document Versioning Service")


app = FastAPI(
    title="Document Versioning Service",
    description="Append-only version history for collaboratively edited documents",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_HEADER],
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


def log_level_for_status(status_code: int) -> int:
    """Server faults at ERROR, write conflicts at WARNING, client mistakes at INFO."""
    if status_code >= 500:
        return logging.ERROR
    if status_code == 409:
        return logging.WARNING
    return logging.INFO


@app.exception_handler(VersioningError)
async def versioning_error_handler(request: Request, exc: VersioningError) -> JSONResponse:
    error = exc.to_structured(get_correlation_id())
    status_code = ERROR_STATUS_CODES.get(exc.code, 400)
    logger.log(
        log_level_for_status(status_code),
        f"{request.method} {request.url.path} failed: {exc.message}",
        extra=error.to_log_dict(),
    )
    return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = InvalidRequestError(list(exc.errors()), correlation_id=get_correlation_id())
    logger.info(f"{request.method} {request.url.path} rejected", extra=error.to_log_dict())
    return JSONResponse(status_code=422, content=error.model_dump(mode="json"))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = UnexpectedServerError(type(exc).__name__, correlation_id=get_correlation_id())
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error.model_dump(mode="json"))


app.include_router(api_v1_router)


@app.get("/health")
async def health_check() -> dict:
    return {"status": "healthy"}


@app.get("/health/infrastructure")
async def infrastructure_health() -> dict:
    return {
        "status": "healthy" if all(app.state.infrastructure_status.values()) else "degraded",
        "components": app.state.infrastructure_status,
    }
