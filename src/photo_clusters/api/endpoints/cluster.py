import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from photo_clusters.api.deps import get_store
from photo_clusters.core.exceptions import AssetSourceError, ClusterCacheMissError, PermissionDeniedError
from photo_clusters.schemas.asset import AssetResponse
from photo_clusters.schemas.cluster import Cluster
from photo_clusters.services.catalog import ClusterStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/clusters", response_model=List[Cluster])
async def list_clusters(store: ClusterStore = Depends(get_store)):
    return store.clusters


@router.get("/clusters/{cluster_id}", response_model=Cluster)
async def get_cluster(cluster_id: str, store: ClusterStore = Depends(get_store)):
    cluster = store.get_cluster(cluster_id)
    if cluster is None:
        raise HTTPException(status_code=404, detail="Cluster not found")
    return cluster


@router.get("/clusters/{cluster_id}/photos", response_model=List[AssetResponse])
async def list_cluster_photos(cluster_id: str, store: ClusterStore = Depends(get_store)):
    try:
        photos = await store.load_cluster_photos(cluster_id)
    except PermissionDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except AssetSourceError as e:
        logger.error(f"Failed to load photos for cluster {cluster_id}: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except ClusterCacheMissError as e:
        logger.error(str(e))
        raise HTTPException(status_code=500, detail=str(e))

    if photos is None:
        raise HTTPException(status_code=404, detail="Cluster not found")
    return [
        AssetResponse(id=photo.id, uri=photo.uri, creation_time_ms=photo.creation_time_ms)
        for photo in photos
    ]
