"""
FastAPI main application for medreport.
Serves the report lifecycle and generation endpoints.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from medreport import __version__
from medreport.app.routers.reports import router as reports_router
from medreport.services.generation_client import generation_client
from medreport.utils.config import settings
from medreport.utils.logging import get_logger

logger = get_logger(__name__)


class HealthResponse(BaseModel):
    status: str
    timestamp: float
    services: Dict[str, Any]
    performance: Optional[Dict[str, Any]] = None
    version: str = __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting medreport API (model={settings.gemini_model})")
    yield
    await generation_client.aclose()
    logger.info("Generation client closed")


app = FastAPI(
    title="medreport API",
    description="Structured medical report generation",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.include_router(reports_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    generation_health = await generation_client.health_check()
    return HealthResponse(
        status=generation_health["status"],
        timestamp=time.time(),
        services={"generation": generation_health},
        performance=generation_client.get_performance_stats(),
    )


if __name__ == "__main__":
    uvicorn.run(
        "medreport.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
