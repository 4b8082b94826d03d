"""
StockScope Backend - FastAPI Application

Main entry point for the backend API.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockscope.core.config import settings
from stockscope.api.v1 import router as api_v1_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    print(f"Starting {settings.app_name} v{settings.app_version}")
    print(f"Environment: {settings.environment}")
    print(f"Data source: {settings.data_source}")

    from stockscope.services.data_ingestion import get_time_series_service
    universe = await get_time_series_service().get_universe()
    print(f"Symbol universe: {len(universe)} symbols")

    yield

    # Shutdown
    print("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    StockScope Market Analytics API

    ## Architecture
    - **Data Ingestion**: Reads per-symbol daily OHLCV CSV files and the universe manifest
    - **Indicator Engine**: RSI, MACD, Bollinger Bands, moving averages, volume correlation (NumPy)
    - **Indicator Cache**: Process-lifetime memoization per symbol, indicator and parameters
    - **Analytics**: Profit, volatility, volume and sentiment per symbol
    - **Scanner**: Top movers, sector rollups and performance comparison
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow common frontend ports
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
# Add any additional origins from settings
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "StockScope Backend API",
        "docs": "/docs",
        "health": "/health",
    }
