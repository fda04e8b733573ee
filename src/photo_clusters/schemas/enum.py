from enum import Enum


class PermissionStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    LIMITED = "limited"
    FULL = "full"

    @property
    def granted(self) -> bool:
        return self in (PermissionStatus.LIMITED, PermissionStatus.FULL)


class ClusterKind(str, Enum):
    MOMENT = "moment"
    TIME = "time"


class LoadState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
