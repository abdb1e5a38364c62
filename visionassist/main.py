"""Main application module for the VisionAssist backend."""
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from visionassist.api import router as api_router
from visionassist.core.config import settings
from visionassist.core.container import container
from visionassist.core.exceptions import ServiceNotInitializedError
from visionassist.core.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[Any, None]:
    """Handle application startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    logger.info(
        "Starting up VisionAssist backend",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )

    if not container.initialized:
        await container.initialize()
    logger.info("Initialized application services")

    yield

    logger.info("Shutting down VisionAssist backend")
    await container.cleanup()
    logger.info("Cleaned up application resources")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 like every other validation failure."""
    logger.warning("Invalid request", path=request.url.path, errors=jsonable_errors(exc))
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_errors(exc)},
    )


@app.exception_handler(ServiceNotInitializedError)
async def service_not_initialized_handler(request: Request, exc: ServiceNotInitializedError) -> JSONResponse:
    logger.error("Service unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": "Service unavailable"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Answer any unexpected failure with a generic 500."""
    logger.error(
        "Unhandled request error",
        path=request.url.path,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


def jsonable_errors(exc: RequestValidationError) -> list:
    """Keep only the JSON-safe parts of pydantic error entries."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


@app.get("/")
async def root() -> dict:
    return {"message": "VisionAssist AR Backend API"}


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint.

    Returns:
        dict: Health status
    """
    logger.info("Health check requested")
    return {"status": "healthy"}


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("visionassist.main:app", host=settings.HOST, port=settings.PORT)
