from .base import MomentReconciler, NullMomentReconciler
from .factory import select_moment_reconciler
from .range_query import RangeQueryMomentReconciler
from .working_set import WorkingSetMomentReconciler

__all__ = [
    "MomentReconciler",
    "NullMomentReconciler",
    "RangeQueryMomentReconciler",
    "WorkingSetMomentReconciler",
    "select_moment_reconciler",
]
