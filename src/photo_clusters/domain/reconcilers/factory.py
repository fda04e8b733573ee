import logging

from photo_clusters.core.config import MomentStrategy
from photo_clusters.domain.sources.base import AssetSource

from .base import MomentReconciler, NullMomentReconciler
from .range_query import DEFAULT_MAX_ASSETS, DEFAULT_PADDING_MS, RangeQueryMomentReconciler
from .working_set import WorkingSetMomentReconciler

logger = logging.getLogger(__name__)


def select_moment_reconciler(
    source: AssetSource,
    strategy: MomentStrategy = "auto",
    padding_ms: float = DEFAULT_PADDING_MS,
    max_assets: int = DEFAULT_MAX_ASSETS,
) -> MomentReconciler:
    """Picks the moment strategy from the source's capabilities once, at startup."""
    capabilities = source.capabilities
    if strategy == "none" or not capabilities.coarse_groups:
        reconciler: MomentReconciler = NullMomentReconciler()
    elif strategy == "range" or (strategy == "auto" and capabilities.range_queries):
        reconciler = RangeQueryMomentReconciler(source, padding_ms, max_assets)
    else:
        reconciler = WorkingSetMomentReconciler(source)

    logger.info(f"Using {reconciler.__class__.__name__} for moments (strategy={strategy}).")
    return reconciler
