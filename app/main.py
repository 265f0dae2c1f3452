"""FastAPI application factory and lifespan."""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.middleware import register_middleware
from app.api.v1 import api_router
from app.core.config import Settings, get_settings
from app.core.errors import ConfigurationError
from app.core.security import PasswordHasher
from app.core.tokens import TokenCodec
from app.db.base import Base
from app.db.session import build_engine, build_session_maker, check_connection

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
        stream=sys.stdout,
    )
    for noisy in ("passlib", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_token_codec(settings: Settings) -> TokenCodec:
    """Token codec from settings; a missing secret is fatal."""
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not set; refusing to start without a signing secret")
    return TokenCodec(
        settings.jwt_secret,
        lifetime=timedelta(seconds=settings.jwt_expires_in),
        algorithm=settings.jwt_algorithm,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: build codec, engine and sessions, check DB; shutdown: dispose engine."""
    settings: Settings = app.state.settings
    configure_logging(settings)
    app.state.token_codec = build_token_codec(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.password_bcrypt_rounds)

    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    try:
        await check_connection(
            engine,
            retries=settings.database_connect_retries,
            delay=settings.database_connect_retry_delay,
        )
        # Dev/test only; use Alembic in production
        if settings.database_create_all:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("%s ready (environment=%s)", settings.app_name, settings.environment)
        yield
    finally:
        logger.info("Closing database connections")
        await engine.dispose()


def create_application(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # CORS: allow everything in debug, localhost in development, CORS_ORIGINS otherwise
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000", *settings.cors_origin_list]
    else:
        cors_origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middleware(app)
    register_exception_handlers(app)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "message": settings.app_name}

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_application()


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
