import logging

from photo_clusters.core.config import Config, configs

from .base import AssetSource
from .http import HttpAssetSource
from .local import LocalDirectoryAssetSource
from .memory import InMemoryAssetSource

logger = logging.getLogger(__name__)


class AssetSourceFactory:
    @staticmethod
    def get_asset_source(source_type: str = "local", config: Config = configs) -> AssetSource:
        logger.info(f"Creating asset source of type: {source_type}")
        if source_type == "local":
            return LocalDirectoryAssetSource(config.MEDIA_ROOT)
        elif source_type == "http":
            if not config.MEDIA_SERVICE_URL:
                raise ValueError("MEDIA_SERVICE_URL must be set for the http asset source")
            return HttpAssetSource(
                base_url=config.MEDIA_SERVICE_URL,
                api_key=config.MEDIA_SERVICE_API_KEY,
                timeout=config.MEDIA_SERVICE_TIMEOUT,
            )
        elif source_type == "memory":
            return InMemoryAssetSource()
        else:
            logger.error(f"Unknown asset source type requested: {source_type}")
            raise ValueError(f"Unknown asset source type: {source_type}")


def get_asset_source_client(config: Config = configs) -> AssetSource:
    return AssetSourceFactory.get_asset_source(config.ASSET_SOURCE_TYPE, config)
