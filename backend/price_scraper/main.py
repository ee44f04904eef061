"""Competitor Tracker Scraper Service -- FastAPI Application Entry Point."""

import logging
import sys
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from price_scraper import __version__
from price_scraper.api.router import api_router
from price_scraper.config import settings
from price_scraper.schemas import ErrorResponse
from price_scraper.scrapers.scraper import PriceScraper
from price_scraper.scrapers.utils.browser_manager import BrowserManager
from price_scraper.scrapers.utils.rate_limiter import ClientRateLimiter


def configure_logging() -> None:
    """Route stdlib logging and structlog through one stream."""
    level = logging.DEBUG if settings.DEBUG else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.ENVIRONMENT == "development"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events.

    The browser itself starts lazily on the first scrape.  Shutdown (the
    ASGI server's response to SIGTERM/SIGINT) closes it before exit.
    """
    logger.info("service_starting", environment=settings.ENVIRONMENT, debug=settings.DEBUG)

    yield

    logger.info("service_shutting_down")
    try:
        await app.state.scraper.close()
    except Exception as e:
        logger.warning("browser_shutdown_failed", error=str(e))


def create_app() -> FastAPI:
    """Build the FastAPI application with its shared scraper session."""
    app = FastAPI(
        title="Competitor Tracker Scraper Service",
        description="Selector-driven price scraping API",
        version=__version__,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # One render session per process, shared by every request
    app.state.scraper = PriceScraper(
        session=BrowserManager(),
        retry_base_delay_ms=settings.RETRY_BASE_DELAY_MS,
    )
    app.state.rate_limiter = ClientRateLimiter(
        max_requests=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "loc": list(err.get("loc", ())),
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Invalid request body", details=details).model_dump(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error="Internal server error").model_dump(exclude_none=True),
        )

    app.include_router(api_router)
    return app


app = create_app()


def run() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run("price_scraper.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
