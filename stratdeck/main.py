"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stratdeck.config import settings
from stratdeck.database import create_db_and_tables
from stratdeck.utils.logging import setup_logging
from stratdeck.api import (
    auth,
    dashboard,
    trades,
    brokers,
    telegram,
    strategies,
    portfolio,
    api_keys,
    system,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    yield


app = FastAPI(
    title="Stratdeck",
    description="Trading strategy subscription dashboard API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(trades.router)
app.include_router(brokers.router)
app.include_router(telegram.router)
app.include_router(strategies.router)
app.include_router(portfolio.router)
app.include_router(api_keys.router)
app.include_router(system.router)
