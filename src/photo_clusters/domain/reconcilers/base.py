import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from photo_clusters.domain.timeutils import format_date_span, to_millis_maybe_seconds
from photo_clusters.schemas.asset import Asset, CoarseGroup
from photo_clusters.schemas.cluster import Cluster
from photo_clusters.schemas.enum import ClusterKind

logger = logging.getLogger(__name__)

MOMENT_GROUP_TYPE = "moment"


class MomentReconciler(ABC):
    """Maps platform moments onto the photos the user can actually reach."""

    @abstractmethod
    async def reconcile_moments(self, working_set: List[Asset]) -> List[Cluster]:
        """
        Builds moment clusters.

        Args:
            working_set: The photos fetched for this reload, newest first.

        Returns:
            Moment clusters with at least one accessible photo, sorted by
            ``start_time_ms`` descending.
        """
        pass


class NullMomentReconciler(MomentReconciler):
    """For platforms without moments."""

    async def reconcile_moments(self, working_set: List[Asset]) -> List[Cluster]:
        return []


def padded_range(start_ms: float, end_ms: float, padding_ms: float) -> Tuple[float, float]:
    return max(0, start_ms - padding_ms), end_ms + padding_ms


def normalized_bounds(group: CoarseGroup) -> Tuple[float, float]:
    return to_millis_maybe_seconds(group.start_time), to_millis_maybe_seconds(group.end_time)


def moment_groups(groups: List[CoarseGroup]) -> List[CoarseGroup]:
    """Drops non-moment groupings and groups with inverted bounds."""
    moments = []
    for group in groups:
        if group.type != MOMENT_GROUP_TYPE:
            continue
        start_ms, end_ms = normalized_bounds(group)
        if start_ms > end_ms:
            logger.warning(f"Skipping moment {group.id}: start {start_ms} is after end {end_ms}")
            continue
        moments.append(group)
    return moments


def build_moment_cluster(
    group: CoarseGroup,
    count: int,
    cover: Asset,
    asset_ids: Optional[List[str]] = None,
) -> Cluster:
    """Place name as title with the date below it, or the date alone."""
    start_ms, end_ms = normalized_bounds(group)
    date_title = format_date_span(start_ms, end_ms)
    place = group.place
    return Cluster(
        id=f"moment_{group.id}",
        kind=ClusterKind.MOMENT,
        title=place or date_title,
        subtitle=date_title if place else None,
        cover_uri=cover.uri,
        count=count,
        start_time_ms=start_ms,
        end_time_ms=end_ms,
        asset_ids=asset_ids,
        album_id=group.id,
    )


def sort_newest_first(clusters: List[Cluster]) -> List[Cluster]:
    return sorted(clusters, key=lambda c: c.start_time_ms or 0, reverse=True)
