"""
CarMatch FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carmatch.api.routes.match import router as match_router
from carmatch.config import settings
from carmatch.schemas.matching import FallbackConfig

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("Starting CarMatch API...")
    logger.info("Fallback config: %s", FallbackConfig.from_settings().model_dump())

    yield

    logger.info("Shutting down CarMatch API...")


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(match_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "CarMatch API",
        "version": settings.api_version,
        "endpoints": {
            "parse": "/match/parse",
            "search": "/match/search",
            "alternatives": "/match/alternatives",
            "decode": "/match/decode",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
