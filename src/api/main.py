"""FastAPI application entry point.

Run with ``todo-api`` (see run()) or ``uvicorn --factory api.main:create_app``
after exporting the environment described in api.config.
"""

import importlib.metadata
import logging
import sys
import tomllib
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adapter.factory import Storage, build_storage
from api.config import Settings, load_settings
from api.errors import register_exception_handlers
from api.routes import auth, health, todos
from services.auth_service import AuthService
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "Todo Tracker API"

SELF_SIGNED_HINT = (
    "openssl req -x509 -newkey rsa:4096 -keyout key.pem -out cert.pem -days 365 -nodes"
)


def _read_version() -> str:
    # pyproject.toml is the single source of truth in a source checkout
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    if pyproject.is_file():
        with open(pyproject, "rb") as f:
            return tomllib.load(f)["project"]["version"]
    return importlib.metadata.version("todo-tracker")


VERSION = _read_version()


def _configure_cors(app: FastAPI, cors_origins_env: str) -> None:
    # Wildcard "*" stays a string, explicit origins become a list.
    # Browsers don't support credentials with a wildcard origin.
    if cors_origins_env.strip() == "*":
        cors_origins = "*"
        allow_credentials = False
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
        )
    else:
        cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
        allow_credentials = True
        logger.info("CORS configured with specific origins", extra={"origins": cors_origins})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(settings: Settings | None = None, storage: Storage | None = None) -> FastAPI:
    """Build the application.

    settings defaults to load_settings(); storage defaults to the backend
    named by settings.database_url. Tests pass both explicitly.
    """
    settings = settings or load_settings()
    storage = storage or build_storage(settings.database_url, settings.mongodb_database)
    auth_service = AuthService(
        storage.user_repo,
        settings.jwt_secret_key,
        token_ttl=timedelta(hours=settings.jwt_expiration_hours),
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: make sure tables / indexes exist."""
        if storage.prepare():
            logger.info("Storage ready", extra={"backend": storage.backend})
        else:
            logger.warning("Storage preparation incomplete", extra={"backend": storage.backend})
        yield

    app = FastAPI(
        title=SERVICE_NAME,
        description="Multi-user todo tracking API with bearer token authentication",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.auth_service = auth_service

    _configure_cors(app, settings.cors_origins)
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(todos.router)
    app.include_router(health.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "status": "running"
        }

    return app


def _tls_options(settings: Settings) -> dict:
    """uvicorn TLS arguments. Exits with status 1 if a PEM file is missing."""
    missing = [p for p in (settings.cert_path, settings.key_path) if not Path(p).is_file()]
    if missing:
        logger.error("TLS certificate or private key not found", extra={"missing": missing})
        logger.error(
            "Provide CERT_PATH and KEY_PATH, or for development generate a "
            "self-signed pair with: " + SELF_SIGNED_HINT
        )
        sys.exit(1)
    return {"ssl_certfile": settings.cert_path, "ssl_keyfile": settings.key_path}


def run() -> None:
    """Console entry point: load .env, configure logging, serve with uvicorn."""
    load_dotenv()
    settings = load_settings()
    setup_structured_logging(settings.log_level)

    tls = _tls_options(settings) if settings.use_https else {}
    app = create_app(settings)

    scheme = "https" if tls else "http"
    logger.info("Todo API starting", extra={
        "url": f"{scheme}://{settings.host}:{settings.port}",
        "backend": app.state.storage.backend,
    })
    if not tls:
        logger.info("To enable HTTPS, set USE_HTTPS=true with CERT_PATH and KEY_PATH")

    # log_config=None keeps uvicorn from replacing the JSON handlers set up above
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
        **tls,
    )


if __name__ == "__main__":
    run()
