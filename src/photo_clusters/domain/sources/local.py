import asyncio
import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import IFD, Base

from photo_clusters.core.exceptions import AssetSourceError
from photo_clusters.domain.sources.base import AssetSource, SourceCapabilities, paginate
from photo_clusters.schemas.asset import Asset, AssetPage
from photo_clusters.schemas.enum import PermissionStatus

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".heic", ".webp", ".tif", ".tiff")
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
MAX_SNAPSHOTS = 8


def extract_datetime(image_path: Path) -> Optional[datetime]:
    """Capture time from EXIF, or None when the file carries none."""
    try:
        with Image.open(image_path) as img:
            exif = img.getexif()
    except (OSError, UnidentifiedImageError) as e:
        logger.debug(f"Could not read EXIF from {image_path}: {e}")
        return None

    value = exif.get_ifd(IFD.Exif).get(Base.DateTimeOriginal) or exif.get(Base.DateTime)
    if not value:
        return None
    try:
        return datetime.strptime(str(value).strip("\x00 "), EXIF_DATETIME_FORMAT)
    except ValueError:
        logger.warning(f"Unparseable EXIF datetime {value!r} in {image_path}")
        return None


class LocalDirectoryAssetSource(AssetSource):
    """Treats a directory tree as the photo library.

    Creation time is in epoch seconds, from EXIF ``DateTimeOriginal`` or the
    file mtime when EXIF is missing. Each sub-directory is an album whose id
    is its path relative to the root.

    A listing scans the tree once. Follow-up pages are served from that scan,
    so their cursors are ``<snapshot id>:<offset>``.
    """

    capabilities = SourceCapabilities(coarse_groups=False, range_queries=True, album_queries=True)

    def __init__(self, media_root: str, max_snapshots: int = MAX_SNAPSHOTS):
        self.media_root = Path(media_root).resolve()
        self.max_snapshots = max_snapshots
        self._snapshots: Dict[str, List[Asset]] = {}
        logger.debug(f"LocalDirectoryAssetSource initialized with base path {self.media_root}")

    def _scan(self, directory: Path) -> List[Asset]:
        assets = []
        for path in directory.rglob("*"):
            if not path.is_file() or path.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            taken = extract_datetime(path)
            creation_time = taken.timestamp() if taken else path.stat().st_mtime
            assets.append(
                Asset(
                    id=str(path.relative_to(self.media_root)),
                    uri=path.resolve().as_uri(),
                    creation_time=creation_time,
                )
            )
        assets.sort(key=lambda a: a.creation_time_ms, reverse=True)
        logger.debug(f"Scanned {len(assets)} photos under {directory}")
        return assets

    async def _list(self, directory: Path) -> List[Asset]:
        if not directory.is_dir():
            logger.warning(f"Directory does not exist: {directory}")
            return []
        return await asyncio.to_thread(self._scan, directory)

    async def _snapshot_page(
        self, load: Callable[[], Awaitable[List[Asset]]], page_size: int, cursor: Optional[str]
    ) -> AssetPage:
        if cursor:
            snapshot_id, _, offset = cursor.partition(":")
            matches = self._snapshots.get(snapshot_id)
            if matches is None:
                raise AssetSourceError(f"Cursor {cursor!r} refers to an expired listing")
        else:
            snapshot_id, offset = uuid.uuid4().hex, None
            matches = await load()

        page = paginate(matches, page_size, offset)
        if not page.has_more:
            self._snapshots.pop(snapshot_id, None)
            return page

        self._snapshots[snapshot_id] = matches
        while len(self._snapshots) > self.max_snapshots:
            # Abandoned listings; dicts keep insertion order.
            self._snapshots.pop(next(iter(self._snapshots)))
        return page.model_copy(update={"next_cursor": f"{snapshot_id}:{page.next_cursor}"})

    async def list_recent_photos(self, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        return await self._snapshot_page(lambda: self._list(self.media_root), page_size, cursor)

    async def list_photos_in_range(
        self, start_ms: float, end_ms: float, page_size: int, cursor: Optional[str] = None
    ) -> AssetPage:
        async def load() -> List[Asset]:
            return [a for a in await self._list(self.media_root) if start_ms <= a.creation_time_ms <= end_ms]

        return await self._snapshot_page(load, page_size, cursor)

    async def list_photos_in_album(self, album_id: str, page_size: int, cursor: Optional[str] = None) -> AssetPage:
        album_dir = (self.media_root / album_id).resolve()
        if self.media_root not in album_dir.parents:
            logger.warning(f"Album {album_id!r} is outside the media root.")
            return AssetPage()
        return await self._snapshot_page(lambda: self._list(album_dir), page_size, cursor)

    async def get_permission(self) -> PermissionStatus:
        if self.media_root.is_dir() and os.access(self.media_root, os.R_OK | os.X_OK):
            return PermissionStatus.FULL
        return PermissionStatus.DENIED
