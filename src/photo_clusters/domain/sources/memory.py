import logging
from typing import Dict, Iterable, List, Optional

from photo_clusters.domain.sources.base import AssetSource, SourceCapabilities, paginate
from photo_clusters.schemas.asset import Asset, AssetPage, CoarseGroup
from photo_clusters.schemas.enum import PermissionStatus

logger = logging.getLogger(__name__)


class InMemoryAssetSource(AssetSource):
    """Asset source backed by plain lists.

    ``accessible_ids`` emulates a limited grant: when set, only those assets
    are ever returned, whatever the coarse groups report.
    """

    def __init__(
        self,
        assets: Iterable[Asset] = (),
        coarse_groups: Iterable[CoarseGroup] = (),
        albums: Optional[Dict[str, List[str]]] = None,
        permission: PermissionStatus = PermissionStatus.FULL,
        accessible_ids: Optional[Iterable[str]] = None,
        capabilities: Optional[SourceCapabilities] = None,
    ):
        self.assets = list(assets)
        self.coarse_groups = list(coarse_groups)
        self.albums = albums or {}
        self.permission = permission
        self.accessible_ids = set(accessible_ids) if accessible_ids is not None else None
        self.capabilities = capabilities or SourceCapabilities(
            coarse_groups=bool(self.coarse_groups),
            limited_picker=True,
        )
        self.picker_presented = 0

    def _visible(self) -> List[Asset]:
        if not self.permission.granted:
            return []
        visible = self.assets
        if self.accessible_ids is not None:
            visible = [a for a in visible if a.id in self.accessible_ids]
        return sorted(visible, key=lambda a: a.creation_time_ms, reverse=True)

    async def list_recent_photos(self, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        return paginate(self._visible(), page_size, cursor)

    async def list_photos_in_range(
        self, start_ms: float, end_ms: float, page_size: int, cursor: Optional[str] = None
    ) -> AssetPage:
        matches = [a for a in self._visible() if start_ms <= a.creation_time_ms <= end_ms]
        return paginate(matches, page_size, cursor)

    async def list_photos_in_album(self, album_id: str, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        members = set(self.albums.get(album_id, []))
        matches = [a for a in self._visible() if a.id in members]
        return paginate(matches, page_size, cursor)

    async def list_coarse_groups(self) -> List[CoarseGroup]:
        if not self.capabilities.coarse_groups:
            return []
        return list(self.coarse_groups)

    async def get_permission(self) -> PermissionStatus:
        return self.permission

    async def request_permission(self) -> PermissionStatus:
        if self.permission == PermissionStatus.NOT_DETERMINED:
            self.permission = PermissionStatus.FULL
            logger.info("Permission granted for in-memory source.")
        return self.permission

    async def present_permissions_picker(self) -> None:
        self.picker_presented += 1
