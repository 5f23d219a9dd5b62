# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Content Console API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.console import console_registry
from app.exceptions import ConsoleException, console_exception_handler
from app.routers import console, health, tables
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log configuration
    - Shutdown: drop in-memory admin consoles
    """
    logger.info(f"Starting Content Console API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info(f"Shutting down Content Console API ({len(console_registry)} open consoles)")
    console_registry.clear()


# Create FastAPI application
app = FastAPI(
    title="Content Console API",
    description="""
## Admin Content Console

Schema-driven editing of the agency website's content tables (posts, services,
team, case studies, testimonials, media and inbound submissions).

### How It Works

1. **Sign in** - `POST /api/v1/auth/login` with an admin account
2. **Pick a table** - `POST /api/v1/admin/console/tabs/{table}`
3. **Edit cells** - start an edit, set a value, commit with Enter
4. **Add / delete rows** - deletions need `confirm=true`

Plain CRUD without console state is available under `/api/v1/admin/tables`.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Admin sign-in and token verification",
        },
        {
            "name": "Tables",
            "description": "Table schemas and row CRUD",
        },
        {
            "name": "Console",
            "description": "Tabbed spreadsheet editing with per-admin state",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ConsoleException)
async def handle_console_exception(request: Request, exc: ConsoleException):
    """Handle custom console exceptions."""
    return await console_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Table schema and row CRUD endpoints
app.include_router(
    tables.router,
    prefix="/api/v1/admin",
    tags=["Tables"]
)

# Data console endpoints
app.include_router(
    console.router,
    prefix="/api/v1/admin/console",
    tags=["Console"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Content Console API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
