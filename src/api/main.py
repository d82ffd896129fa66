"""FastAPI application entry point."""

import os
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Must run before importing modules that read env vars at import time
load_dotenv()

from api.errors import register_exception_handlers
from api.routes import auth, users, health
from utils.logging import setup_structured_logging
from api.dependencies import get_token_service
from adapter.mongodb.connection import get_database
from adapter.mongodb.indexes import ensure_all_indexes

setup_structured_logging()

logger = logging.getLogger(__name__)

# Version lives in pyproject.toml at the repository root
_project_root = Path(__file__).parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "User Management API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic.

    A missing JWT_SECRET_KEY stops startup here rather than on the first
    sign-in.
    """
    get_token_service()

    db = get_database()
    if db is not None:
        if ensure_all_indexes(db):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="User registration, sign-in and profile management",
    version=VERSION,
    lifespan=lifespan,
)


def _cors_settings() -> tuple[list[str], bool]:
    """Allowed origins and whether credentials may be sent.

    FRONTEND_URL (single origin) wins over CORS_ORIGINS (comma-separated).
    Browsers refuse credentials with a wildcard origin.
    """
    frontend_url = os.getenv("FRONTEND_URL")
    origins_env = frontend_url or os.getenv("CORS_ORIGINS", "*")
    if origins_env == "*":
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "Set FRONTEND_URL or CORS_ORIGINS to specific domains in production"
        )
        return ["*"], False
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    logger.info(f"CORS configured with specific origins: {origins}")
    return origins, True


cors_origins, allow_credentials = _cors_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Application logs already go through structured logging
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
