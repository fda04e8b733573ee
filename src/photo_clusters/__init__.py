import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from photo_clusters.api.api import api_router
from photo_clusters.core.config import configs
from photo_clusters.core.exceptions import PhotoClustersError
from photo_clusters.domain.sources.factory import get_asset_source_client
from photo_clusters.services.catalog import ClusterStore

logger = logging.getLogger(__name__)


def init_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=configs.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def init_routers(app: FastAPI) -> None:
    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["Root"])
    async def read_root():
        return {
            "message": "Welcome to the Photo Clusters API!",
            "docs_url": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}


def init_monitoring(app: FastAPI) -> None:
    Instrumentator().instrument(app).expose(app)


def build_lifespan(store: Optional[ClusterStore] = None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Owns the cluster store for the lifetime of the app. The store is
        created here, not at import time, and handed to requests through
        ``get_store``.
        """
        logger.info("Starting application lifespan...")
        app.state.store = store or ClusterStore(get_asset_source_client())
        try:
            await app.state.store.initialize()
        except PhotoClustersError as e:
            logger.error(f"Initial catalog load failed: {e}")
        yield

        logger.info("Shutting down application lifespan...")
        app.state.store.reset()
        await app.state.store.source.aclose()

    return lifespan


def create_app(store: Optional[ClusterStore] = None) -> FastAPI:
    app = FastAPI(
        title="Photo Clusters API",
        description="Groups a photo library into moments and time clusters for browsing.",
        version="1.0.0",
        lifespan=build_lifespan(store),
    )
    if store is not None:
        app.state.store = store

    init_routers(app=app)
    init_monitoring(app=app)
    init_cors(app=app)
    return app
