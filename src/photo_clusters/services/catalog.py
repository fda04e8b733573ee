import logging
from typing import Dict, List, Optional

from photo_clusters.core.config import Config, configs
from photo_clusters.core.exceptions import PermissionDeniedError
from photo_clusters.domain.clusterers.base import Clusterer
from photo_clusters.domain.clusterers.time_clusterer import TimeGapClusterer
from photo_clusters.domain.paging import fetch_recent_photos
from photo_clusters.domain.photo_cache import ClusterPhotoCache
from photo_clusters.domain.reconcilers import MomentReconciler, select_moment_reconciler
from photo_clusters.domain.sources.base import AssetSource
from photo_clusters.schemas.asset import Asset
from photo_clusters.schemas.cluster import CatalogStatus, Cluster
from photo_clusters.schemas.enum import PermissionStatus

logger = logging.getLogger(__name__)

NO_ACCESS_NOTICE = "Allow access to your photo library to see your moments."
LOAD_FAILED_MESSAGE = "Could not load photos"


class ClusterStore:
    """
    Session state for one photo library: permission, cluster catalog and
    per-cluster photo cache.

    Each reload builds a new catalog and cache and swaps both in at once.
    A failed reload keeps the previous ones. Reloads are numbered and a
    reload that finishes after a newer one started is discarded.
    """

    def __init__(
        self,
        source: AssetSource,
        config: Config = configs,
        reconciler: Optional[MomentReconciler] = None,
        clusterer: Optional[Clusterer] = None,
    ):
        self.source = source
        self.config = config
        self.reconciler = reconciler or select_moment_reconciler(
            source, config.MOMENT_STRATEGY, config.moment_padding_ms, config.MAX_ASSETS
        )
        self.clusterer = clusterer or TimeGapClusterer(config.time_clustering)

        self.permission = PermissionStatus.NOT_DETERMINED
        self.is_loading = False
        self.error: Optional[str] = None
        self.notice: Optional[str] = None

        self.clusters: List[Cluster] = []
        self._clusters_by_id: Dict[str, Cluster] = {}
        self.photo_cache = self._new_cache()
        self._generation = 0

    def _new_cache(self) -> ClusterPhotoCache:
        return ClusterPhotoCache(
            self.source,
            padding_ms=self.config.moment_padding_ms,
            max_assets=self.config.MAX_ASSETS,
            page_size=self.config.PAGE_SIZE,
        )

    def _replace_catalog(self, clusters: List[Cluster], cache: ClusterPhotoCache) -> None:
        self.clusters = clusters
        self._clusters_by_id = {c.id: c for c in clusters}
        self.photo_cache = cache

    async def initialize(self) -> CatalogStatus:
        """Reads the current grant and loads the catalog if access is granted."""
        self.permission = await self.source.get_permission()
        logger.info(f"Initializing cluster store, permission={self.permission.value}")
        if self.permission.granted:
            await self.reload()
        else:
            self.notice = NO_ACCESS_NOTICE
        return self.status()

    async def request_permission(self) -> CatalogStatus:
        previous = self.permission
        self.permission = await self.source.request_permission()
        logger.info(f"Permission request finished: {previous.value} -> {self.permission.value}")
        if self.permission.granted and self.permission != previous:
            await self.reload()
        elif not self.permission.granted:
            self.notice = NO_ACCESS_NOTICE
        return self.status()

    async def present_permissions_picker(self) -> CatalogStatus:
        """Lets the user widen a limited grant, then reloads."""
        if not self.source.capabilities.limited_picker:
            logger.debug("Asset source has no permissions picker; ignoring request.")
            return self.status()
        await self.source.present_permissions_picker()
        await self.reload()
        return self.status()

    async def reload(self) -> bool:
        """
        Rebuilds the whole catalog from the asset source.

        Returns:
            True if this reload's catalog was installed.
        """
        self._generation += 1
        generation = self._generation
        self.is_loading = True
        self.error = None
        logger.info(f"Reload #{generation} started.")

        try:
            self.permission = await self.source.get_permission()
            if not self.permission.granted:
                if generation == self._generation:
                    logger.info(f"Reload #{generation}: no library access, clearing catalog.")
                    self._replace_catalog([], self._new_cache())
                    self.notice = NO_ACCESS_NOTICE
                return False

            working_set = await fetch_recent_photos(self.source, self.config.MAX_ASSETS, self.config.PAGE_SIZE)
            moment_clusters = await self.reconciler.reconcile_moments(working_set)
            time_clusters = await self.clusterer.cluster(working_set)
            clusters = moment_clusters + time_clusters

            cache = self._new_cache()
            cache.prefill(clusters, working_set)
        except PermissionDeniedError as e:
            logger.warning(f"Reload #{generation}: access refused by the asset source: {e}")
            if generation == self._generation:
                self.permission = PermissionStatus.DENIED
                self._replace_catalog([], self._new_cache())
                self.notice = NO_ACCESS_NOTICE
            return False
        except Exception as e:
            logger.exception(f"Reload #{generation} failed: {e}")
            if generation == self._generation:
                self.error = f"{LOAD_FAILED_MESSAGE}: {e}"
            return False
        finally:
            if generation == self._generation:
                self.is_loading = False

        if generation != self._generation:
            logger.info(f"Reload #{generation} superseded by #{self._generation}; discarding its results.")
            return False

        self._replace_catalog(clusters, cache)
        self.notice = None
        logger.info(
            f"Reload #{generation} finished: {len(moment_clusters)} moments, "
            f"{len(time_clusters)} time clusters from {len(working_set)} photos."
        )
        return True

    def reset(self) -> None:
        logger.info("Resetting cluster store.")
        self._generation += 1
        self._replace_catalog([], self._new_cache())
        self.is_loading = False
        self.error = None

    def get_cluster(self, cluster_id: str) -> Optional[Cluster]:
        return self._clusters_by_id.get(cluster_id)

    async def load_cluster_photos(self, cluster_id: str) -> Optional[List[Asset]]:
        """Photos of a cluster, fetched on first access. None for unknown ids."""
        cluster = self.get_cluster(cluster_id)
        if cluster is None:
            logger.debug(f"Ignoring photo request for unknown cluster {cluster_id}.")
            return None
        return await self.photo_cache.get(cluster)

    def status(self) -> CatalogStatus:
        return CatalogStatus(
            is_loading=self.is_loading,
            error=self.error,
            notice=self.notice,
            permission=self.permission,
            cluster_count=len(self.clusters),
        )
