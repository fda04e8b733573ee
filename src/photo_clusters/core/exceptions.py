"""
Application-specific exceptions.

Callers catch these to tell apart adapter failures, missing grants and
broken cache invariants without relying on generic Exception types.
"""


class PhotoClustersError(Exception):
    """Base exception for all errors raised by the clustering service."""
    pass


class AssetSourceError(PhotoClustersError):
    """Raised when the asset source adapter fails to enumerate or query photos."""
    pass


class PermissionDeniedError(PhotoClustersError):
    """Raised when the photo library cannot be read because access was not granted."""
    pass


class ClusterCacheMissError(PhotoClustersError):
    """Raised when a time cluster has no prefilled photo list."""
    pass
