"""Main application entry point."""
import logging

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promo_offers.config import settings

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Configure standard logging
logging.basicConfig(
    format="%(message)s",
    level=getattr(logging, settings.log_level.upper()),
)

logger = logging.getLogger(__name__)
events = structlog.get_logger("promo_offers.lifecycle")

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Promotional offers and discount calculation for the product catalog",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed payloads are client errors (400), like invalid time windows."""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    logger.warning(f"Malformed request to {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            {
                "detail": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request payload is invalid",
                    "errors": errors,
                }
            }
        ),
    )


@app.on_event("startup")
async def startup_event() -> None:
    """Startup event handler."""
    events.info("startup", service=settings.app_name, version=settings.app_version)

    from promo_offers.infrastructure.database import init_db
    logger.info("Initializing offers database")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """Shutdown event handler."""
    events.info("shutdown", service=settings.app_name)

    from promo_offers.infrastructure.database import close_db
    await close_db()


from promo_offers.api import monitoring, routes  # noqa: E402

app.include_router(routes.router)
app.include_router(monitoring.router)


@app.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run(
        "promo_offers.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
