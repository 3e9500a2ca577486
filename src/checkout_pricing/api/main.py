"""
Checkout API - FastAPI application exposing the checkout pipeline.

Run with `checkout-pricing` (or `uvicorn checkout_pricing.api.main:app`).
"""
import sys
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config.settings import Settings, get_settings
from ..data.build_catalogue import setup
from ..data.catalogue import SqliteCatalogue, connect
from ..engine.errors import (
    CatalogueSetupError,
    CheckoutError,
    INTERNAL_ERROR_MESSAGE,
    INVALID_BODY_MESSAGE,
)
from ..logging_config import configure_logging, get_logger
from ..services.checkout_service import CheckoutService


logger = get_logger(__name__)


def get_checkout_service(request: Request) -> CheckoutService:
    service = request.app.state.checkout_service
    if service is None:
        raise RuntimeError("Checkout service is not initialised")
    return service


def create_app(
    checkout_service: Optional[CheckoutService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        checkout_service: Pre-built service (tests inject one over an
            in-memory catalogue). When omitted, startup opens and seeds the
            SQLite catalogue from settings.
        settings: Optional settings override
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        connection = None
        if app.state.checkout_service is None:
            app_settings = settings or get_settings()
            configure_logging(app_settings)
            connection = connect(app_settings.database_path)
            setup(connection, app_settings.seed_dir)
            app.state.checkout_service = CheckoutService(SqliteCatalogue(connection))
        try:
            yield
        finally:
            if connection is not None:
                app.state.checkout_service = None
                connection.close()

    app = FastAPI(
        title="Checkout Pricing API",
        description="Prices checkout requests with bundle discounts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.checkout_service = checkout_service

    # Single boundary for anything the routes do not handle themselves
    @app.middleware("http")
    async def error_boundary(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("unhandled exception", method=request.method, path=request.url.path)
            return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})

    # Outermost, so responses from the boundary get CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CheckoutError)
    async def checkout_error_handler(request: Request, exc: CheckoutError):
        return JSONResponse(status_code=exc.http_status, content=exc.as_dict())

    # Malformed JSON never reaches the validator
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("checkout rejected", reason="INVALID_BODY", detail="undecodable body")
        return JSONResponse(status_code=400, content={"error": INVALID_BODY_MESSAGE})

    # Body parser failures (bad encoding, oversized numbers), 404s and 405s
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 400:
            logger.warning("checkout rejected", reason="INVALID_BODY", detail=str(exc.detail))
            message = INVALID_BODY_MESSAGE
        else:
            message = str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)

    @app.get("/health")
    async def health():
        return {"status": "online", "message": "Checkout Pricing API Active"}

    @app.post("/checkout")
    @app.post("/", include_in_schema=False)
    def checkout(
        payload: Any = Body(None),
        service: CheckoutService = Depends(get_checkout_service),
    ):
        result = service.checkout(payload)
        return jsonable_encoder(result)

    @app.get("/catalogue")
    def get_catalogue(service: CheckoutService = Depends(get_checkout_service)):
        return [item.to_dict() for item in service.catalogue_listing()]

    return app


app = create_app()


def main():
    """Seed the catalogue and serve the API until interrupted."""
    settings = get_settings()
    configure_logging(settings)

    if settings.testing:
        # The test harness owns the listening socket
        logger.info("test mode, not listening", port=settings.port)
        return

    connection = connect(settings.database_path)
    try:
        try:
            setup(connection, settings.seed_dir)
        except CatalogueSetupError:
            logger.exception("catalogue setup failed")
            sys.exit(1)

        # Seeded here, so the lifespan does not seed again
        served = create_app(
            checkout_service=CheckoutService(SqliteCatalogue(connection)),
            settings=settings,
        )
        logger.info("server starting", host=settings.host, port=settings.port)
        uvicorn.run(served, host=settings.host, port=settings.port, log_config=None)
    finally:
        connection.close()


if __name__ == "__main__":
    main()
