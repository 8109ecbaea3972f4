import asyncio
import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

load_dotenv()

from navconsole.db.init_db import init_db  # noqa: E402
from navconsole.dependencies.settings import get_settings  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    if settings.auto_create_tables:
        init_db()
        logger.info("Database tables ensured")

    try:
        yield
    except asyncio.CancelledError:
        logger.info("Application shutdown requested (CancelledError). Exiting gracefully.")
    except Exception:
        logger.exception("Unhandled exception during application lifespan shutdown.")
        raise


settings = get_settings()

tags_metadata = [
    {"name": "Root", "description": "Basic status endpoint."},
    {"name": "Auth", "description": "Authentication endpoints."},
    {"name": "Menu_Management", "description": "Top menus (GLinks), sub menus (PLinks), ordering and navigation."},
    {"name": "Role_Management", "description": "Roles and their menu grant strings."},
    {"name": "Health", "description": "Health, readiness and liveness probes."},
]

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    openapi_tags=tags_metadata,
    docs_url="/swagger",
    swagger_ui_parameters={"displayRequestDuration": True, "persistAuthorization": True},
    lifespan=_lifespan,
)


@app.get("/", tags=["Root"])
async def root():
    return {"message": settings.app_name}


# Set up GZip compression middleware (BEFORE CORS)
app.add_middleware(
    GZipMiddleware,
    minimum_size=1000,  # Only compress responses > 1KB
    compresslevel=6,
)

cors_origins_env = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173")
cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]

logger.info(f"CORS enabled for origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routers
from .routers import auth, health, menus, roles  # noqa: E402

app.include_router(auth.router)
app.include_router(health.router)
app.include_router(menus.router)
app.include_router(roles.router)


__all__ = ["app"]
