"""ApplicationSet (GitOps) normalizer."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..engine.config import EngineConfig
from ..engine.health import classify
from ..engine.models import ContextResult, DRContext
from . import resources as r
from .watch import Resource, WatchResult, all_ready

logger = logging.getLogger("drstatus.topology.appset")


def normalize_appset(
    appset: WatchResult[Resource],
    placements: WatchResult[list[Resource]],
    drpcs: WatchResult[list[Resource]],
    drpolicies: WatchResult[list[Resource]],
    now: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> ContextResult:
    """Build the DR context for an ApplicationSet-managed workload.

    The placement is taken from the ApplicationSet's cluster-decision
    generator; the placement-control is the one whose ``placementRef`` names
    it, and the policy is resolved by name from the placement-control.
    """
    if not all_ready(appset, placements, drpcs, drpolicies):
        return ContextResult.loading()

    app = appset.data
    if not app:
        return ContextResult.no_context()
    name, namespace = r.get_name(app), r.get_namespace(app)

    placement_name = r.get_placement_name_from_appset(app)
    if not placement_name:
        logger.debug("%s/%s has no placement generator", namespace, name)
        return ContextResult.no_context()
    placement = r.find_placement(placements.data or [], placement_name, namespace)
    if placement is None:
        logger.debug("%s/%s: placement %s not found", namespace, name, placement_name)
        return ContextResult.no_context()

    drpc = r.find_drpc_for_placement(drpcs.data or [], placement_name, namespace)
    if drpc is None:
        return ContextResult.no_context()
    drpolicy = r.find_policy(drpolicies.data or [], r.get_policy_name(drpc))
    if drpolicy is None:
        logger.debug("%s/%s: DRPolicy %s not found", namespace, name, r.get_policy_name(drpc))
        return ContextResult.no_context()

    interval = r.get_scheduling_interval(drpolicy)
    mode = r.get_replication_mode(drpolicy)
    primary = r.get_last_deployment_cluster(drpc)
    last_sync = r.get_volume_last_sync_time(drpc)

    return ContextResult.ready(
        DRContext(
            phase=r.get_phase(drpc),
            volume_replication_health=classify(last_sync, interval, mode, now=now, config=config),
            is_cleanup_required=r.is_cleanup_pending(drpc),
            kube_object_replication_health=r.kube_object_health(drpc, now, config),
            primary_cluster=primary,
            target_cluster=r.get_target_cluster(drpolicy, primary),
            policy_name=r.get_name(drpolicy),
            scheduling_interval=interval,
            volume_last_sync_time=last_sync,
            last_kube_object_protection_time=r.get_last_kube_object_protection_time(drpc),
            placement_conditions=r.get_placement_conditions(drpc),
            resource_conditions=r.get_resource_conditions(drpc),
            name=name,
            namespace=namespace,
            replication_mode=mode,
            progression=r.get_progression(drpc),
        )
    )
