"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from parcelhub import models  # noqa: F401  - registers tables on Base.metadata
from parcelhub.api.routes import auth, health, invoices, meters, parcels, payments, users
from parcelhub.core.config import settings
from parcelhub.core.database import Base, engine
from parcelhub.core.exceptions import WebpayError
from parcelhub.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    setup_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Parcels, meters, invoices and payments",
    lifespan=lifespan,
)


@app.exception_handler(WebpayError)
async def webpay_error_handler(request: Request, exc: WebpayError) -> JSONResponse:
    """Report gateway failures as 502 without leaking their context."""
    logger.error(
        "Webpay error on %s %s: %s %s",
        request.method,
        request.url.path,
        exc.message,
        exc.context,
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": exc.message},
    )


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(parcels.router)
app.include_router(meters.router)
app.include_router(invoices.router)
app.include_router(payments.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "parcelhub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
