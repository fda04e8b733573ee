from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from photo_clusters.schemas.asset import Asset, AssetPage, CoarseGroup
from photo_clusters.schemas.enum import PermissionStatus


def paginate(matches: List[Asset], page_size: int, cursor: Optional[str] = None) -> AssetPage:
    """Slice an already sorted match list; cursors are stringified offsets."""
    offset = int(cursor) if cursor else 0
    end = offset + page_size
    has_more = end < len(matches)
    return AssetPage(
        assets=matches[offset:end],
        next_cursor=str(end) if has_more else None,
        has_more=has_more,
        total_matched=len(matches),
    )


@dataclass(frozen=True)
class SourceCapabilities:
    coarse_groups: bool = False
    range_queries: bool = True
    album_queries: bool = True
    limited_picker: bool = False


class AssetSource(ABC):
    """Abstract base class for the platform media layer.

    Every listing returns photos only, sorted newest-first by creation time.
    """

    capabilities: SourceCapabilities = SourceCapabilities()

    @abstractmethod
    async def list_recent_photos(self, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        """
        List one page of the photo library.

        Args:
            page_size: Maximum number of assets in the page.
            cursor: The ``next_cursor`` of the previous page, if any.

        Returns:
            The page, with ``total_matched`` counting all matches.
        """
        pass

    @abstractmethod
    async def list_photos_in_range(
        self, start_ms: float, end_ms: float, page_size: int, cursor: Optional[str] = None
    ) -> AssetPage:
        """
        Like ``list_recent_photos`` but restricted to creation times within
        ``[start_ms, end_ms]``.
        """
        pass

    @abstractmethod
    async def list_photos_in_album(self, album_id: str, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        pass

    async def list_coarse_groups(self) -> List[CoarseGroup]:
        """Platform moments; empty where the platform has none."""
        return []

    @abstractmethod
    async def get_permission(self) -> PermissionStatus:
        pass

    async def request_permission(self) -> PermissionStatus:
        return await self.get_permission()

    async def present_permissions_picker(self) -> None:
        """Let the user widen a limited grant. No-op unless supported."""
        return None

    async def aclose(self) -> None:
        return None
