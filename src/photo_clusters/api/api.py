from fastapi import APIRouter

from photo_clusters.api.endpoints import catalog, cluster, permission

api_router = APIRouter()
api_router.include_router(catalog.router, tags=["Catalog"])
api_router.include_router(cluster.router, tags=["Clusters"])
api_router.include_router(permission.router, prefix="/permission", tags=["Permission"])
