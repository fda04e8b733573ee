import logging
from typing import List, Optional

from photo_clusters.core.config import TimeClusteringConfig
from photo_clusters.domain.clusterers.base import Clusterer
from photo_clusters.domain.timeutils import format_date_span, format_time_span, local_day
from photo_clusters.schemas.asset import Asset
from photo_clusters.schemas.cluster import Cluster
from photo_clusters.schemas.enum import ClusterKind

logger = logging.getLogger(__name__)


class TimeGapClusterer(Clusterer):
    def __init__(self, config: Optional[TimeClusteringConfig] = None):
        self.config = config or TimeClusteringConfig()
        logger.debug(
            f"TimeGapClusterer initialized with gap={self.config.time_gap_minutes}min, "
            f"min_cluster_size={self.config.min_cluster_size}"
        )

    async def cluster(self, assets: List[Asset]) -> List[Cluster]:
        """Splits assets on time gaps, folds small chunks into same-day neighbours."""
        if not assets:
            return []

        logger.info(f"Starting time-gap clustering for {len(assets)} assets.")
        chunks = self.split_by_gap(assets)
        merged = self.merge_small_chunks(chunks)
        clusters = [self._to_cluster(idx, chunk) for idx, chunk in enumerate(merged)]
        logger.info(f"Time-gap clustering produced {len(chunks)} chunks, {len(clusters)} after merging.")
        return clusters

    def split_by_gap(self, assets: List[Asset]) -> List[List[Asset]]:
        """Newest-first chunks where consecutive members are at most one gap apart."""
        if not assets:
            return []

        sorted_assets = sorted(assets, key=lambda a: a.creation_time_ms, reverse=True)
        gap_ms = self.config.gap_ms

        chunks: List[List[Asset]] = []
        current: List[Asset] = [sorted_assets[0]]

        for asset in sorted_assets[1:]:
            # Compare with the last placed member, not the chunk head.
            time_gap = abs(current[-1].creation_time_ms - asset.creation_time_ms)
            if time_gap <= gap_ms:
                current.append(asset)
            else:
                logger.debug(f"Time gap of {time_gap / 1000:.0f}s exceeded threshold. Starting new chunk.")
                chunks.append(current)
                current = [asset]

        chunks.append(current)
        return chunks

    def merge_small_chunks(self, chunks: List[List[Asset]]) -> List[List[Asset]]:
        """
        Appends each undersized chunk to the previous output chunk when both
        anchor days (local day of the oldest member) match. Undersized chunks
        with no same-day predecessor are kept as they are.
        """
        merged: List[List[Asset]] = []
        for chunk in chunks:
            if len(chunk) >= self.config.min_cluster_size or not merged:
                merged.append(chunk)
                continue

            prev = merged[-1]
            if _anchor_day(prev) == _anchor_day(chunk):
                logger.debug(f"Merging chunk of {len(chunk)} into previous chunk of {len(prev)}.")
                merged[-1] = prev + chunk
            else:
                merged.append(chunk)
        return merged

    def _to_cluster(self, idx: int, chunk: List[Asset]) -> Cluster:
        oldest, newest = chunk[-1], chunk[0]
        start_ms, end_ms = oldest.creation_time_ms, newest.creation_time_ms
        return Cluster(
            id=f"time_{idx}_{oldest.id}",
            kind=ClusterKind.TIME,
            title=format_date_span(start_ms, end_ms),
            subtitle=format_time_span(start_ms, end_ms),
            cover_uri=newest.uri,
            count=len(chunk),
            start_time_ms=start_ms,
            end_time_ms=end_ms,
            asset_ids=[a.id for a in chunk],
        )


def _anchor_day(chunk: List[Asset]):
    return local_day(chunk[-1].creation_time_ms)


async def cluster_by_time(assets: List[Asset], config: Optional[TimeClusteringConfig] = None) -> List[Cluster]:
    return await TimeGapClusterer(config).cluster(assets)
