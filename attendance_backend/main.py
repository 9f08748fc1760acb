"""
attendance_backend/main.py
University Attendance System API: application factory and server entry
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.middleware import SlowAPIASGIMiddleware
from slowapi.util import get_remote_address

from attendance_backend.config import Settings, load_settings, setup_logging
from attendance_backend.database import Database
from attendance_backend.middleware.error_handler import register_exception_handlers
from attendance_backend.routes import attendance, auth, courses, departments, faculties, lessons, sections, users
from attendance_backend.security.http_headers import SecureCacheMiddleware, SecurityHeadersMiddleware
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.security.tokens import TokenService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application...")
    try:
        await app.state.database.create_all()
        logger.info("Database connected successfully")
    except Exception as e:
        logger.error(f"Failed to connect to database: {str(e)}")
        raise

    yield

    logger.info("Shutting down application...")
    app.state.password_hasher.shutdown()
    await app.state.database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around one Settings instance.

    Everything stateful (database handle, password hasher, token service,
    rate limiter) is created here and hung off app.state, so tests can build
    as many isolated apps as they like.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="University Attendance System API",
        description="Faculties, courses, sections, lessons and attendance for admins, teachers and students",
        version="1.0.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings.database_url, echo=settings.sql_echo)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        settings.jwt_secret,
        settings.token_lifetime,
        algorithm=settings.jwt_algorithm,
    )

    # Rate limiter
    app.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
    app.add_middleware(SlowAPIASGIMiddleware)
    logger.info(f"✓ Rate limiter configured ({settings.rate_limit}, enabled={settings.rate_limit_enabled})")

    app.add_middleware(SecureCacheMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=not settings.is_development)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, debug=settings.is_development)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "OK",
            "message": "University Attendance System API is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    for module in (auth, users, faculties, departments, courses, sections, lessons, attendance):
        app.include_router(module.router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings: Settings = app.state.settings
    logger.info(f"Starting server on 0.0.0.0:{settings.port}")
    logger.info(f"Environment: {settings.environment}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
