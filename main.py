"""
Palette Service Backend
FastAPI application exposing the hex palette clustering pipeline.
"""
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before config is read
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from palette_service.api.v1 import router as v1_router
from palette_service.config import config
from palette_service.schemas import HealthResponse
from palette_service.services.palette.runtime import get_runtime
from palette_service.utils.logging import get_logger

logger = get_logger(__name__)

# Fail fast on misconfigured defaults
config.validate_defaults()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Warm-up runs on a worker thread; requests get 503 until it completes.
    # With eager init off, the first request schedules it instead.
    app.state.runtime_init = None
    if config.EAGER_INIT:
        app.state.runtime_init = get_runtime().start_initialization()
    else:
        logger.info("Eager runtime initialization disabled; first request will start it")
    yield


app = FastAPI(
    title="Palette Service",
    description="Clusters hex colors with k-means and orders them into a perceptual palette strip",
    version=config.VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"]
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    return HealthResponse(
        ok=True,
        version=config.VERSION,
        service=config.SERVICE_NAME,
        ready=get_runtime().ready
    )


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Palette Service API",
        "version": config.VERSION,
        "docs": "/docs"
    }


@app.get("/runtime")
def runtime_status():
    """Numeric runtime readiness and clustering defaults."""
    return get_runtime().status()
