"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from userhub.api import router as api_router
from userhub.core.config import Settings, get_settings
from userhub.core.errors import UserhubError
from userhub.core.logging_config import configure_logging
from userhub.core.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """First validation problem as 'field: message', without echoing the input back."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    msg = first.get("msg", "invalid value")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(UserhubError)
    async def handle_userhub_error(request: Request, exc: UserhubError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Request failed: %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application from validated settings.

    Services are constructed here, so a missing JWT_SECRET raises
    TokenServiceConfigError before the app can serve anything.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Userhub API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.token_service = TokenService(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    if settings.APP_ENV == "dev":
        origins = ["*"] if settings.FRONTEND_ORIGIN is None else [settings.FRONTEND_ORIGIN]
    else:
        origins = [settings.FRONTEND_ORIGIN] if settings.FRONTEND_ORIGIN else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    if settings.API_PREFIX:

        @app.get("/")
        def root() -> dict[str, str]:
            """Root route; minimal payload for discovery."""
            return {"message": "Userhub API"}

    logger.info("Userhub API configured (env=%s, prefix=%s)", settings.APP_ENV, settings.API_PREFIX)
    return app


app = create_app()
