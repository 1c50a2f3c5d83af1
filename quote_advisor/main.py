"""
FastAPI application entry point.
Insurance Quote Advisor
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quote_advisor import __version__
from quote_advisor.config import get_settings
from quote_advisor.api.routes import router
from quote_advisor.core.quote_store import get_quote_store


# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Quote Advisor API...")
    settings = get_settings()
    logger.info(f"API Version: {__version__}")
    if not settings.notification_url:
        logger.warning("NOTIFICATION_URL is not set; purchase requests will not be delivered")

    yield

    # Shutdown
    logger.info("Shutting down Quote Advisor API...")
    get_quote_store().clear()
    logger.info("Cleanup complete")


# Create FastAPI application
app = FastAPI(
    title="Quote Advisor API",
    description="""
    Insurance quote comparison and recommendation service

    ## Features

    - Generate quotes from every provider offering an insurance line
    - Compare, filter and rank quotes against the user's budget
    - Match the request to a specialised representative
    - Record the user's decision with a 3 business day response window

    ## Quick Start

    1. POST an insurance type to `/api/quotes/generate`
    2. POST the quotes to `/api/quotes/recommendation`
    3. POST the user's decision to `/api/interests`
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(router)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Quote Advisor API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "quote_advisor.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
