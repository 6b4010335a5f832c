import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from routes.chat_route import router as chat_router
from services.gateway.factory import create_gateway
from utils.config import Settings, configure_logging

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager that attaches the model gateway to `app.state`.

    A gateway already placed on `app.state` (e.g. by tests) is left alone.
    """
    if getattr(app.state, "model_gateway", None) is None:
        app.state.model_gateway = create_gateway(app.state.settings)

    try:
        yield
    finally:
        gateway = getattr(app.state, "model_gateway", None)
        if gateway is not None:
            try:
                await gateway.aclose()
            except Exception as exc:
                LOGGER.warning("Error while closing the model gateway: %s", exc)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    LOGGER.info("Rejected malformed chat payload: %s", exc.errors())
    return JSONResponse({"error": "Invalid request body."}, status_code=400)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="MyDocta", lifespan=lifespan)
    app.state.settings = settings
    app.state.model_gateway = None

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)

    @app.get("/health")
    async def health(request: Request):
        """
        Report the configured provider and whether it has a usable credential.
        """
        gateway = getattr(request.app.state, "model_gateway", None)
        return {
            "ok": True,
            "provider": request.app.state.settings.model_provider,
            "model_available": bool(gateway is not None and getattr(gateway, "configured", True)),
        }

    app.include_router(chat_router)

    return app


app = create_app()
