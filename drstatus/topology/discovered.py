"""Discovered-application normalizer.

Discovered workloads are protected directly by a placement-control in the
DR operator namespace, without a GitOps or subscription placement in between.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..engine.config import EngineConfig
from ..engine.health import classify
from ..engine.models import ContextResult, DRContext
from . import resources as r
from .watch import Resource, WatchResult, all_ready

logger = logging.getLogger("drstatus.topology.discovered")


def normalize_discovered(
    drpc: WatchResult[Resource],
    drpolicies: WatchResult[list[Resource]],
    now: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> ContextResult:
    if not all_ready(drpc, drpolicies):
        return ContextResult.loading()

    placement_control = drpc.data
    if not placement_control:
        return ContextResult.no_context()
    policy_name = r.get_policy_name(placement_control)
    drpolicy = r.find_policy(drpolicies.data or [], policy_name)
    if drpolicy is None:
        logger.debug(
            "%s: DRPolicy %s not found", r.get_name(placement_control), policy_name
        )
        return ContextResult.no_context()

    interval = r.get_scheduling_interval(drpolicy)
    mode = r.get_replication_mode(drpolicy)
    primary = r.get_primary_cluster(placement_control)
    last_sync = r.get_volume_last_sync_time(placement_control)
    placement_conditions = r.get_placement_conditions(placement_control)

    return ContextResult.ready(
        DRContext(
            phase=r.get_phase(placement_control),
            volume_replication_health=classify(last_sync, interval, mode, now=now, config=config),
            is_cleanup_required=r.is_cleanup_pending(placement_control),
            kube_object_replication_health=r.kube_object_health(placement_control, now, config),
            primary_cluster=primary,
            target_cluster=r.get_target_cluster(drpolicy, primary),
            policy_name=policy_name,
            scheduling_interval=interval,
            volume_last_sync_time=last_sync,
            last_kube_object_protection_time=r.get_last_kube_object_protection_time(
                placement_control
            ),
            placement_conditions=placement_conditions,
            resource_conditions=r.get_resource_conditions(placement_control),
            name=r.get_name(placement_control),
            namespace=r.get_namespace(placement_control),
            replication_mode=mode,
            progression=r.get_progression(placement_control),
            protected_condition=r.find_condition(placement_conditions, r.CONDITION_PROTECTED),
            available_condition=r.find_condition(placement_conditions, r.CONDITION_AVAILABLE),
        )
    )
