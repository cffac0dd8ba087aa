"""
FastAPI Main Application

Entry point for the Philippine tax calculator API.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tax import get_rules

from .routes import (
    calculators_router,
    rates_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: load and validate rule tables once
    rules = get_rules()
    logger.info(f"Starting Tax Calculator API with rules from {rules.source}")
    yield
    # Shutdown
    logger.info("Shutting down Tax Calculator API...")


app = FastAPI(
    title="Tax Calculator API",
    description="API for Philippine compensation, VAT, customs and freelancer tax computations",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration
cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(calculators_router, prefix="/api")
app.include_router(rates_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Tax Calculator API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api")
async def api_info():
    """API information endpoint."""
    return {
        "endpoints": {
            "compensation": "/api/calculators/compensation",
            "income_tax": "/api/calculators/income-tax",
            "vat": "/api/calculators/vat",
            "vat_extract": "/api/calculators/vat-extract",
            "customs": "/api/calculators/customs",
            "freelancer": "/api/calculators/freelancer",
            "income_tax_table": "/api/rates/income-tax",
            "customs_fees": "/api/rates/customs-fees",
            "tariffs": "/api/rates/tariffs",
            "directory": "/api/rates/directory",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
