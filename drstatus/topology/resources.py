"""Accessors for Ramen / ACM resources shared by the topology normalizers."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from ..engine.config import EngineConfig
from ..engine.health import classify
from ..engine.models import Condition, DRPhase, ReplicationHealth, ReplicationMode
from .watch import Resource

LAST_APP_DEPLOYMENT_CLUSTER_ANNOTATION = (
    "drplacementcontrol.ramendr.openshift.io/last-app-deployment-cluster"
)
PLACEMENT_REF_LABEL = "cluster.open-cluster-management.io/placement"
PLACEMENT_KIND = "Placement"
PLACEMENT_RULE_KIND = "PlacementRule"
PROGRESSION_WAIT_ON_USER_CLEANUP = "WaitOnUserToCleanUp"
CONDITION_PROTECTED = "Protected"
CONDITION_AVAILABLE = "Available"
SYNC_SCHEDULING_INTERVAL = "0m"


def _get(obj: Optional[Resource], *path: str, default: Any = None) -> Any:
    cur: Any = obj
    for key in path:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(key)
    return default if cur is None else cur


def get_name(obj: Optional[Resource]) -> str:
    return _get(obj, "metadata", "name", default="")


def get_namespace(obj: Optional[Resource]) -> str:
    return _get(obj, "metadata", "namespace", default="")


# --- DRPolicy ---

def get_scheduling_interval(drpolicy: Optional[Resource]) -> str:
    return _get(drpolicy, "spec", "schedulingInterval", default="")


def get_policy_clusters(drpolicy: Optional[Resource]) -> list[str]:
    return list(_get(drpolicy, "spec", "drClusters", default=[]))


def get_replication_mode(drpolicy: Optional[Resource]) -> ReplicationMode:
    if _get(drpolicy, "status", "async"):
        return ReplicationMode.ASYNC
    if _get(drpolicy, "status", "sync"):
        return ReplicationMode.SYNC
    if get_scheduling_interval(drpolicy) == SYNC_SCHEDULING_INTERVAL:
        return ReplicationMode.SYNC
    return ReplicationMode.ASYNC


def find_policy(drpolicies: list[Resource], name: str) -> Optional[Resource]:
    return next((p for p in drpolicies if get_name(p) == name), None)


# --- DRPlacementControl ---

def get_policy_name(drpc: Optional[Resource]) -> str:
    return _get(drpc, "spec", "drPolicyRef", "name", default="")


def get_phase(drpc: Optional[Resource]) -> Optional[DRPhase]:
    return DRPhase.parse(_get(drpc, "status", "phase"))


def get_progression(drpc: Optional[Resource]) -> Optional[str]:
    return _get(drpc, "status", "progression")


def get_last_deployment_cluster(drpc: Optional[Resource]) -> str:
    return _get(drpc, "metadata", "annotations", LAST_APP_DEPLOYMENT_CLUSTER_ANNOTATION, default="")


def get_primary_cluster(drpc: Optional[Resource]) -> str:
    phase = get_phase(drpc)
    if phase is None:
        return ""
    if phase == DRPhase.FAILED_OVER:
        return _get(drpc, "spec", "failoverCluster", default="")
    if phase == DRPhase.RELOCATED:
        return _get(drpc, "spec", "preferredCluster", default="")
    return get_last_deployment_cluster(drpc)


def get_target_cluster(drpolicy: Optional[Resource], primary_cluster: str) -> str:
    return ", ".join(c for c in get_policy_clusters(drpolicy) if c != primary_cluster)


def is_cleanup_pending(drpc: Optional[Resource]) -> bool:
    return (
        get_phase(drpc) in (DRPhase.FAILED_OVER, DRPhase.RELOCATING)
        and get_progression(drpc) == PROGRESSION_WAIT_ON_USER_CLEANUP
    )


def get_placement_conditions(drpc: Optional[Resource]) -> tuple[Condition, ...]:
    return tuple(Condition.from_dict(c) for c in _get(drpc, "status", "conditions", default=[]))


def get_resource_conditions(drpc: Optional[Resource]) -> tuple[Condition, ...]:
    raw = _get(drpc, "status", "resourceConditions", "conditions", default=[])
    return tuple(Condition.from_dict(c) for c in raw)


def find_condition(conditions: tuple[Condition, ...], condition_type: str) -> Optional[Condition]:
    return next((c for c in conditions if c.type == condition_type), None)


def get_volume_last_sync_time(drpc: Optional[Resource]) -> Optional[str]:
    return _get(drpc, "status", "lastGroupSyncTime")


def get_kube_object_capture_interval(drpc: Optional[Resource]) -> str:
    return _get(drpc, "spec", "kubeObjectProtection", "captureInterval", default="")


def get_last_kube_object_protection_time(drpc: Optional[Resource]) -> Optional[str]:
    return _get(drpc, "status", "lastKubeObjectProtectionTime")


def kube_object_health(
    drpc: Optional[Resource],
    now: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> Optional[ReplicationHealth]:
    """Object-metadata health, or None when no capture interval is configured."""
    interval = get_kube_object_capture_interval(drpc)
    if not interval:
        return None
    return classify(
        get_last_kube_object_protection_time(drpc),
        interval,
        ReplicationMode.ASYNC,
        now=now,
        config=config,
    )


def find_drpc_for_placement(
    drpcs: list[Resource],
    placement_name: str,
    namespace: str,
    kind: str = PLACEMENT_KIND,
) -> Optional[Resource]:
    """DRPC whose placementRef names this Placement (or PlacementRule)."""
    for drpc in drpcs:
        ref = _get(drpc, "spec", "placementRef", default={})
        if (
            ref.get("name") == placement_name
            and ref.get("kind", PLACEMENT_KIND) == kind
            and (ref.get("namespace") or get_namespace(drpc)) == namespace
        ):
            return drpc
    return None


# --- ApplicationSet / Subscription / Placement ---

def get_subscription_placement_ref(subscription: Optional[Resource]) -> tuple[str, str]:
    """(kind, name) of a subscription's placement; kind defaults to PlacementRule."""
    ref = _get(subscription, "spec", "placement", "placementRef", default={})
    return ref.get("kind") or PLACEMENT_RULE_KIND, ref.get("name") or ""


def get_placement_name_from_appset(appset: Optional[Resource]) -> str:
    generators = _get(appset, "spec", "generators", default=[])
    if not generators:
        return ""
    return _get(
        generators[0],
        "clusterDecisionResource", "labelSelector", "matchLabels", PLACEMENT_REF_LABEL,
        default="",
    )


def find_placement(placements: list[Resource], name: str, namespace: str) -> Optional[Resource]:
    return next(
        (p for p in placements if get_name(p) == name and get_namespace(p) == namespace),
        None,
    )
