# qrlink/main.py

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qrlink.api import analytics, auth, qr_codes, redirect
from qrlink.config import Settings, load_settings
from qrlink.core.errors import AppError
from qrlink.core.security import build_auth_strategy
from qrlink.storage import MemoryCodeRegistry, MemoryUserStore


logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI):

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="QRLink")

    app.state.settings = settings
    app.state.users = MemoryUserStore()
    app.state.registry = MemoryCodeRegistry()
    app.state.auth = build_auth_strategy(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(qr_codes.router)
    app.include_router(redirect.router)
    app.include_router(analytics.router)

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    logger.info("QRLink started with %s auth (%s)", settings.auth_strategy, settings.environment)
    return app


app = create_app()
