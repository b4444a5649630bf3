"""
FastAPI Backend for MTG Printing Resolution
Resolves OCR scan evidence to a specific card printing
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import logging

from api.routes import resolve
from api.services.rate_limiter import limiter
from mtg_resolver.config import API_HOST, API_PORT, LOG_LEVEL
from mtg_resolver.matching.recency import get_recency_set

# Configure logging to show INFO level messages
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(levelname)s:     %(name)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: load the recency table on startup."""
    recency = get_recency_set()
    logger.info(f"Recency table ready ({len(recency)} sets)")

    yield  # App runs here

    logger.info("Shutting down MTG Resolution API")


app = FastAPI(
    title="MTG Printing Resolution API",
    description="Resolve OCR scan evidence to a specific card printing",
    version="0.1.0",
    lifespan=lifespan
)

# Attach rate limiter to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(resolve.router, prefix="/api", tags=["resolve"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "mtg-print-resolver"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host=API_HOST, port=API_PORT, reload=True)
