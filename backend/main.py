"""
Wine Menu Scanner API

FastAPI backend that scans restaurant wine menus and ranks the wines
for the user from their rating history.

Usage:
    uvicorn main:app --reload
"""

# Load environment variables from .env file FIRST
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from menu_scanner.config import Config

# Configure logging from environment
logging.basicConfig(
    level=getattr(logging, Config.log_level(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)
logger.info(f"Starting with LOG_LEVEL={Config.log_level()}, DEV_MODE={Config.is_dev()}")
from fastapi.middleware.cors import CORSMiddleware

from menu_scanner.ingestion.catalog_import import CatalogImporter
from menu_scanner.routes import catalog_router, history_router, imports_router, scan_router, wines_router
from menu_scanner.routes.dependencies import get_wine_catalog

# Startup state - set to True once DB is ready
_is_ready = False


def is_ready() -> bool:
    """Check if the service is ready to handle requests."""
    return _is_ready


def set_ready(ready: bool = True):
    """Set the service ready state."""
    global _is_ready
    _is_ready = ready


def bootstrap_catalog() -> None:
    """Import the bundled catalog CSV into an empty catalog."""
    csv_path = Path(Config.catalog_csv_path())
    if not csv_path.exists():
        logger.warning(f"Catalog CSV not found at {csv_path}, catalog left as is")
        return
    stats = CatalogImporter(get_wine_catalog()).import_file(csv_path)
    if not stats.already_populated:
        logger.info(f"Catalog bootstrapped with {stats.rows_imported} wines")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Startup: migrate and seed the catalog before accepting scans
    bootstrap_catalog()
    set_ready(True)
    logger.info("Service ready to handle requests")
    yield
    # Shutdown
    set_ready(False)


app = FastAPI(
    title="Wine Menu Scanner API",
    description="Scan wine menus and get personal recommendations",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web and mobile apps
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def warmup_middleware(request: Request, call_next):
    """Return 503 with retry hint if service is still warming up."""
    # Always allow health checks (for probes) and root
    if request.url.path in ("/health", "/", "/docs", "/openapi.json"):
        return await call_next(request)

    if not is_ready():
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service warming up",
                "message": "The server is starting up. Please retry in a few seconds.",
                "retry_after": 10,
            },
            headers={"Retry-After": "10"},
        )

    return await call_next(request)


# Include routers
app.include_router(scan_router, tags=["scan"])
app.include_router(history_router, tags=["history"])
app.include_router(wines_router, tags=["wines"])
app.include_router(catalog_router, tags=["catalog"])
app.include_router(imports_router, tags=["import"])


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Wine Menu Scanner API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint for container probes."""
    return {"status": "healthy", "ready": is_ready()}
