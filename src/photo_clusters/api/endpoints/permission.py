from fastapi import APIRouter, Depends

from photo_clusters.api.deps import get_store
from photo_clusters.schemas.cluster import CatalogStatus
from photo_clusters.services.catalog import ClusterStore

router = APIRouter()


@router.post("/request", response_model=CatalogStatus)
async def request_permission(store: ClusterStore = Depends(get_store)):
    return await store.request_permission()


@router.post("/picker", response_model=CatalogStatus)
async def present_permissions_picker(store: ClusterStore = Depends(get_store)):
    return await store.present_permissions_picker()
