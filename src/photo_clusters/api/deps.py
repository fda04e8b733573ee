from fastapi import Request

from photo_clusters.services.catalog import ClusterStore


async def get_store(request: Request) -> ClusterStore:
    return request.app.state.store
