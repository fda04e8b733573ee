from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from photo_clusters.schemas.enum import ClusterKind, PermissionStatus


class Cluster(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: ClusterKind
    title: str
    subtitle: Optional[str] = None
    cover_uri: Optional[str] = None
    count: int
    start_time_ms: Optional[float] = None
    end_time_ms: Optional[float] = None
    asset_ids: Optional[List[str]] = None
    album_id: Optional[str] = None

    @model_validator(mode="after")
    def check_time_bounds(self) -> "Cluster":
        if (
            self.start_time_ms is not None
            and self.end_time_ms is not None
            and self.start_time_ms > self.end_time_ms
        ):
            raise ValueError("start_time_ms must not be after end_time_ms")
        return self


class CatalogStatus(BaseModel):
    is_loading: bool = False
    error: Optional[str] = None
    notice: Optional[str] = None
    permission: PermissionStatus = PermissionStatus.NOT_DETERMINED
    cluster_count: int = 0


class CatalogResponse(BaseModel):
    status: CatalogStatus
    clusters: List[Cluster] = []
