"""Resource factories shared by the topology tests."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from drstatus.engine.config import EngineConfig
from drstatus.topology.resources import (
    LAST_APP_DEPLOYMENT_CLUSTER_ANNOTATION,
    PLACEMENT_REF_LABEL,
)

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
FRESH = "2026-03-01T11:58:00Z"  # 2 minutes ago
STALE = "2026-03-01T11:52:00Z"  # 8 minutes ago
ANCIENT = "2026-03-01T10:00:00Z"

CFG = EngineConfig(warning_multiplier=1.0, critical_multiplier=2.0)


def make_drpolicy(name="policy-5m", interval="5m", clusters=("east-1", "west-1"), **status):
    return {
        "kind": "DRPolicy",
        "metadata": {"name": name},
        "spec": {"schedulingInterval": interval, "drClusters": list(clusters)},
        "status": status,
    }


def make_drpc(
    name="app-drpc",
    namespace="app-ns",
    placement="app-placement",
    placement_kind="Placement",
    policy="policy-5m",
    phase: Optional[str] = "Deployed",
    last_sync: Optional[str] = FRESH,
    deployed_on: str = "east-1",
    progression: Optional[str] = None,
    capture_interval: Optional[str] = None,
    last_kube_protection: Optional[str] = None,
    conditions: Optional[list[dict[str, Any]]] = None,
    resource_conditions: Optional[list[dict[str, Any]]] = None,
    **spec: Any,
) -> dict[str, Any]:
    drpc: dict[str, Any] = {
        "kind": "DRPlacementControl",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "annotations": {LAST_APP_DEPLOYMENT_CLUSTER_ANNOTATION: deployed_on},
        },
        "spec": {
            "drPolicyRef": {"name": policy},
            "placementRef": {"kind": placement_kind, "name": placement, "namespace": namespace},
            **spec,
        },
        "status": {
            "phase": phase,
            "lastGroupSyncTime": last_sync,
            "progression": progression,
            "conditions": conditions or [],
            "resourceConditions": {"conditions": resource_conditions or []},
        },
    }
    if capture_interval:
        drpc["spec"]["kubeObjectProtection"] = {"captureInterval": capture_interval}
    if last_kube_protection:
        drpc["status"]["lastKubeObjectProtectionTime"] = last_kube_protection
    return drpc


def make_placement(name="app-placement", namespace="app-ns"):
    return {"kind": "Placement", "metadata": {"name": name, "namespace": namespace}}


def make_appset(name="app", namespace="app-ns", placement="app-placement"):
    return {
        "kind": "ApplicationSet",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "generators": [
                {
                    "clusterDecisionResource": {
                        "labelSelector": {"matchLabels": {PLACEMENT_REF_LABEL: placement}}
                    }
                }
            ]
        },
    }
