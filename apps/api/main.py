from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from apps.api.routes import health, vendors
from apps.core.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "startup complete", extra={"env": settings.environment, "port": os.getenv("PORT", "8000")}
    )
    yield


# Create FastAPI app
app = FastAPI(
    title="Vendor Discovery API",
    description="Geo-ranked search over event vendors (venues, caterers, decor, photography, entertainment)",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS - the front end reads the search debug headers
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Search-Debug", "X-Search-Degraded"],
)

# Include routers
app.include_router(health.router, prefix="/api")
app.include_router(vendors.router, prefix="/api", tags=["vendors"])

@app.get("/")
async def root():
    return {"message": "Vendor Discovery API", "version": "1.0.0"}
