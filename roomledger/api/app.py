"""FastAPI application for the record-keeping API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from roomledger import __version__
from roomledger.api.ledger import router as ledger_router
from roomledger.services import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables before serving requests."""
    init_db()
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Room Ledger",
    description="Rooms, tenants, rent, mess and deposit records for a rental property",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(ledger_router)


# Register health check endpoint
@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint for monitoring."""
    return {"status": "ok"}
