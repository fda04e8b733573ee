from .base import AssetSource, SourceCapabilities
from .factory import AssetSourceFactory, get_asset_source_client

__all__ = ["AssetSource", "AssetSourceFactory", "SourceCapabilities", "get_asset_source_client"]
