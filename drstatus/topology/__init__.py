"""Topology normalizers - adapt ApplicationSet, Subscription and Discovered
resource graphs into a DRContext."""
from .appset import normalize_appset
from .discovered import normalize_discovered
from .subscription import (
    GroupStatus,
    SubscriptionGroup,
    classify_group,
    normalize_subscription,
    select_worst_and_representative,
)
from .watch import SnapshotWatch, WatchResult, all_ready

__all__ = [
    "GroupStatus",
    "SnapshotWatch",
    "SubscriptionGroup",
    "WatchResult",
    "all_ready",
    "classify_group",
    "normalize_appset",
    "normalize_discovered",
    "normalize_subscription",
    "select_worst_and_representative",
]
