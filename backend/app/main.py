"""
Alerta FastAPI Application - Business Rule Impact Service
Read-only analysis of which business rules a Pull Request touches
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.endpoints import business_impact_api
from .config import get_settings
from .services.business_impact import load_rule_catalog

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management."""
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")

    catalog = load_rule_catalog()
    logger.info(f"Rule catalog ready: {catalog.get_statistics()}")

    yield

    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Business rule impact propagation for Pull Request governance",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Liveness probe with catalog statistics."""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": settings.app_version,
            "rule_catalog": load_rule_catalog().get_statistics(),
        }
    )


app.include_router(business_impact_api.router, prefix="/api", tags=["Business Impact"])


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
