import logging
from typing import List

from photo_clusters.domain.reconcilers.base import (
    MomentReconciler,
    build_moment_cluster,
    moment_groups,
    normalized_bounds,
    padded_range,
    sort_newest_first,
)
from photo_clusters.domain.sources.base import AssetSource
from photo_clusters.schemas.asset import Asset
from photo_clusters.schemas.cluster import Cluster

logger = logging.getLogger(__name__)

DEFAULT_PADDING_MS = 2 * 60 * 1000
DEFAULT_MAX_ASSETS = 2500


class RangeQueryMomentReconciler(MomentReconciler):
    """
    Asks the source, per moment, how many photos it can really return inside
    the padded moment span. ``count`` is the source's match total, never the
    platform's reported count, and moments with no reachable photo are
    dropped. Photo lists are left for the cache to fetch on demand, and
    ``count`` is capped at the same ``max_assets`` that fetch stops at.
    """

    def __init__(
        self,
        source: AssetSource,
        padding_ms: float = DEFAULT_PADDING_MS,
        max_assets: int = DEFAULT_MAX_ASSETS,
    ):
        self.source = source
        self.padding_ms = padding_ms
        self.max_assets = max_assets

    async def reconcile_moments(self, working_set: List[Asset]) -> List[Cluster]:
        groups = moment_groups(await self.source.list_coarse_groups())
        logger.info(f"Reconciling {len(groups)} moments with range queries.")

        clusters = []
        for group in groups:
            start_ms, end_ms = padded_range(*normalized_bounds(group), self.padding_ms)
            cover_page = await self.source.list_photos_in_range(start_ms, end_ms, page_size=1)

            if cover_page.total_matched == 0 or not cover_page.assets:
                logger.debug(f"Dropping moment {group.id}: no accessible photos.")
                continue

            count = min(cover_page.total_matched, self.max_assets)
            clusters.append(build_moment_cluster(group, count, cover_page.assets[0]))

        logger.info(f"Kept {len(clusters)} of {len(groups)} moments.")
        return sort_newest_first(clusters)
