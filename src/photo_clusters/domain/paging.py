import logging
from typing import Awaitable, Callable, List, Optional

from photo_clusters.domain.sources.base import AssetSource
from photo_clusters.schemas.asset import Asset, AssetPage

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, Optional[str]], Awaitable[AssetPage]]


async def fetch_all(fetch_page: PageFetcher, max_assets: int, page_size: int) -> List[Asset]:
    """
    Pages through ``fetch_page`` one request at a time until the source runs
    out or ``max_assets`` are collected.
    """
    assets: List[Asset] = []
    cursor: Optional[str] = None
    has_more = True

    while has_more and len(assets) < max_assets:
        page = await fetch_page(min(page_size, max_assets - len(assets)), cursor)
        assets.extend(page.assets)
        has_more = page.has_more and page.next_cursor is not None
        cursor = page.next_cursor

    return assets[:max_assets]


async def fetch_recent_photos(source: AssetSource, max_assets: int, page_size: int) -> List[Asset]:
    """Working set: the newest ``max_assets`` photos, newest first."""
    assets = await fetch_all(source.list_recent_photos, max_assets, page_size)
    logger.info(f"Fetched working set of {len(assets)} photos (cap {max_assets}).")
    return assets


async def fetch_photos_in_range(
    source: AssetSource, start_ms: float, end_ms: float, max_assets: int, page_size: int
) -> List[Asset]:
    async def fetch_page(size: int, cursor: Optional[str]) -> AssetPage:
        return await source.list_photos_in_range(start_ms, end_ms, size, cursor)

    return await fetch_all(fetch_page, max_assets, page_size)


async def fetch_photos_in_album(source: AssetSource, album_id: str, max_assets: int, page_size: int) -> List[Asset]:
    async def fetch_page(size: int, cursor: Optional[str]) -> AssetPage:
        return await source.list_photos_in_album(album_id, size, cursor)

    return await fetch_all(fetch_page, max_assets, page_size)
