import asyncio
import logging
from typing import Dict, List, Optional

from photo_clusters.core.exceptions import ClusterCacheMissError
from photo_clusters.domain.paging import fetch_photos_in_album, fetch_photos_in_range
from photo_clusters.domain.reconcilers.base import padded_range
from photo_clusters.domain.reconcilers.range_query import DEFAULT_PADDING_MS
from photo_clusters.domain.sources.base import AssetSource
from photo_clusters.schemas.asset import Asset
from photo_clusters.schemas.cluster import Cluster
from photo_clusters.schemas.enum import ClusterKind, LoadState

logger = logging.getLogger(__name__)


class ClusterPhotoCache:
    """
    Photo lists per cluster id for one catalog generation.

    Time clusters are always prefilled by the reload that built them. Moment
    clusters without a prefilled list are fetched on first access and kept,
    empty results included, until the cache is replaced. Concurrent requests
    for one id share a single in-flight fetch.
    """

    def __init__(
        self,
        source: AssetSource,
        padding_ms: float = DEFAULT_PADDING_MS,
        max_assets: int = 2500,
        page_size: int = 200,
    ):
        self.source = source
        self.padding_ms = padding_ms
        self.max_assets = max_assets
        self.page_size = page_size
        self._entries: Dict[str, List[Asset]] = {}
        self._in_flight: Dict[str, asyncio.Future] = {}

    def __contains__(self, cluster_id: str) -> bool:
        return cluster_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def state(self, cluster_id: str) -> LoadState:
        if cluster_id in self._entries:
            return LoadState.LOADED
        if cluster_id in self._in_flight:
            return LoadState.LOADING
        return LoadState.NOT_LOADED

    def peek(self, cluster_id: str) -> Optional[List[Asset]]:
        entry = self._entries.get(cluster_id)
        return list(entry) if entry is not None else None

    def put(self, cluster_id: str, assets: List[Asset]) -> None:
        self._entries[cluster_id] = list(assets)

    def prefill(self, clusters: List[Cluster], working_set: List[Asset]) -> None:
        """Stores the photo list of every cluster that carries ``asset_ids``."""
        by_id = {a.id: a for a in working_set}
        for cluster in clusters:
            if cluster.asset_ids is None:
                continue
            self.put(cluster.id, [by_id[asset_id] for asset_id in cluster.asset_ids if asset_id in by_id])
        logger.debug(f"Prefilled photo lists for {len(self._entries)} clusters.")

    async def get(self, cluster: Cluster) -> List[Asset]:
        cached = self.peek(cluster.id)
        if cached is not None:
            return cached

        if cluster.kind == ClusterKind.TIME:
            raise ClusterCacheMissError(f"Time cluster {cluster.id} has no prefilled photos")

        pending = self._in_flight.get(cluster.id)
        if pending is not None:
            return list(await asyncio.shield(pending))

        future = asyncio.get_running_loop().create_future()
        self._in_flight[cluster.id] = future
        try:
            assets = await self._fetch_moment(cluster)
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an unawaited failure is not reported again.
            future.exception()
            raise
        else:
            self.put(cluster.id, assets)
            future.set_result(assets)
        finally:
            if not future.done():
                future.cancel()
            self._in_flight.pop(cluster.id, None)

        logger.info(f"Loaded {len(assets)} photos for {cluster.id}.")
        return list(assets)

    async def _fetch_moment(self, cluster: Cluster) -> List[Asset]:
        if cluster.start_time_ms is not None and cluster.end_time_ms is not None:
            start_ms, end_ms = padded_range(cluster.start_time_ms, cluster.end_time_ms, self.padding_ms)
            logger.debug(f"Fetching {cluster.id} by time range [{start_ms}, {end_ms}].")
            return await fetch_photos_in_range(self.source, start_ms, end_ms, self.max_assets, self.page_size)

        if cluster.album_id is not None:
            logger.debug(f"Fetching {cluster.id} by album {cluster.album_id}.")
            return await fetch_photos_in_album(self.source, cluster.album_id, self.max_assets, self.page_size)

        logger.warning(f"Cluster {cluster.id} has neither time bounds nor album; caching empty list.")
        return []
