import logging

from fastapi import APIRouter, Depends

from photo_clusters.api.deps import get_store
from photo_clusters.schemas.cluster import CatalogResponse, CatalogStatus
from photo_clusters.services.catalog import ClusterStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog(store: ClusterStore = Depends(get_store)):
    return CatalogResponse(status=store.status(), clusters=store.clusters)


@router.post("/catalog/reload", response_model=CatalogResponse)
async def reload_catalog(store: ClusterStore = Depends(get_store)):
    logger.info("Catalog reload requested.")
    await store.reload()
    return CatalogResponse(status=store.status(), clusters=store.clusters)


@router.get("/status", response_model=CatalogStatus)
async def get_status(store: ClusterStore = Depends(get_store)):
    return store.status()
