from abc import ABC, abstractmethod
from typing import List

from photo_clusters.schemas.asset import Asset
from photo_clusters.schemas.cluster import Cluster


class Clusterer(ABC):
    """Abstract base class for a clustering strategy."""

    @abstractmethod
    async def cluster(self, assets: List[Asset]) -> List[Cluster]:
        """
        Groups a working set of assets into clusters.

        Args:
            assets: Assets in any order.

        Returns:
            Clusters, newest first.
        """
        pass
