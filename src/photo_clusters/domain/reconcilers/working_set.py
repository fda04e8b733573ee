import logging
from typing import List

from photo_clusters.domain.reconcilers.base import (
    MomentReconciler,
    build_moment_cluster,
    moment_groups,
    normalized_bounds,
    sort_newest_first,
)
from photo_clusters.domain.sources.base import AssetSource
from photo_clusters.schemas.asset import Asset
from photo_clusters.schemas.cluster import Cluster

logger = logging.getLogger(__name__)


class WorkingSetMomentReconciler(MomentReconciler):
    """
    Matches moments against the already fetched working set instead of
    querying per moment. Moments outside the working set's time window
    come out empty and are dropped.
    """

    def __init__(self, source: AssetSource):
        self.source = source

    async def reconcile_moments(self, working_set: List[Asset]) -> List[Cluster]:
        groups = moment_groups(await self.source.list_coarse_groups())
        logger.info(f"Reconciling {len(groups)} moments against {len(working_set)} working-set photos.")

        clusters = []
        for group in groups:
            start_ms, end_ms = normalized_bounds(group)
            matches = sorted(
                (a for a in working_set if start_ms <= a.creation_time_ms <= end_ms),
                key=lambda a: a.creation_time_ms,
                reverse=True,
            )
            if not matches:
                logger.debug(f"Dropping moment {group.id}: no photos in the working set.")
                continue

            clusters.append(
                build_moment_cluster(group, len(matches), matches[0], asset_ids=[a.id for a in matches])
            )

        logger.info(f"Kept {len(clusters)} of {len(groups)} moments.")
        return sort_newest_first(clusters)
