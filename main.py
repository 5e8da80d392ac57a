"""
Theater Booking Administration - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from theater_admin.core.config import settings
from theater_admin.core.db import engine, Base
from theater_admin.core.errors import DomainError
from theater_admin.api import routes_admin, routes_public, ws
from theater_admin.services.config_store import ConfigStore, LocalStorage
from theater_admin.utils.responses import domain_error_response

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    if not settings.USE_FIREBASE:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")

    config_store = ConfigStore(LocalStorage(settings.CONFIG_STORAGE_DIR), settings.CONFIG_STORAGE_KEY)
    config_store.load()
    app.state.config_store = config_store
    logger.info("Configuration loaded (schema version %d)", config_store.get().schema_version)
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Theater Booking Administration",
    description="Backend for show scheduling, reservations, waiting list and check-in",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(DomainError)
async def handle_domain_error(request: Request, exc: DomainError):
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return domain_error_response(exc)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
