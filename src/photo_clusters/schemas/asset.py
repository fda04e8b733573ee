from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from photo_clusters.domain.timeutils import to_millis_maybe_seconds


class Asset(BaseModel):
    """A single photo as reported by the asset source.

    ``creation_time`` keeps whatever unit the source reported; compare
    ``creation_time_ms`` instead.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    uri: str
    creation_time: float

    @property
    def creation_time_ms(self) -> float:
        return to_millis_maybe_seconds(self.creation_time)


class AssetPage(BaseModel):
    assets: List[Asset] = []
    next_cursor: Optional[str] = None
    has_more: bool = False
    total_matched: int = 0


class CoarseGroup(BaseModel):
    """A platform-supplied moment with its nominal time span."""
    model_config = ConfigDict(frozen=True)

    id: str
    start_time: float
    end_time: float
    location_names: Optional[List[str]] = None
    reported_count: Optional[int] = None
    type: str = "moment"

    @property
    def place(self) -> Optional[str]:
        if self.location_names:
            return self.location_names[0]
        return None


class AssetResponse(BaseModel):
    id: str
    uri: str
    creation_time_ms: float
