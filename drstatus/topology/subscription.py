"""Subscription normalizer.

A subscription application may be split into several subscription groups,
each protected by its own placement-control. Each group is classified on its
own, then reduced to one context: the worst volume health across groups,
with cluster and sync details taken from a representative group.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, Optional

from ..engine.config import EngineConfig
from ..engine.health import classify
from ..engine.models import ContextResult, DRContext, DRPhase, ReplicationHealth
from . import resources as r
from .watch import Resource, WatchResult, all_ready

logger = logging.getLogger("drstatus.topology.subscription")

_IN_TRANSITION = (DRPhase.FAILING_OVER, DRPhase.RELOCATING)


@dataclass
class SubscriptionGroup:
    """Subscriptions sharing one placement, with their DR resources (if any)."""

    name: str
    drpc: Optional[Resource] = None
    drpolicy: Optional[Resource] = None
    dr_clusters: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GroupStatus:
    group_name: str
    context: DRContext

    @property
    def volume_replication_health(self) -> ReplicationHealth:
        return self.context.volume_replication_health

    @property
    def phase(self) -> Optional[DRPhase]:
        return self.context.phase


def classify_group(
    group: SubscriptionGroup,
    now: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> Optional[GroupStatus]:
    """Per-group context, or None for a group that is not DR protected."""
    drpc = group.drpc
    if not drpc:
        return None
    if not group.dr_clusters:
        logger.debug("Group %s has a DRPC but no DR clusters", group.name)
        return None

    interval = r.get_scheduling_interval(group.drpolicy)
    mode = r.get_replication_mode(group.drpolicy)
    primary = r.get_primary_cluster(drpc)
    target = next((c for c in group.dr_clusters if c != primary), "")
    last_sync = r.get_volume_last_sync_time(drpc)

    ctx = DRContext(
        phase=r.get_phase(drpc),
        volume_replication_health=classify(last_sync, interval, mode, now=now, config=config),
        is_cleanup_required=r.is_cleanup_pending(drpc),
        primary_cluster=primary,
        target_cluster=target,
        policy_name=r.get_policy_name(drpc),
        scheduling_interval=interval,
        volume_last_sync_time=last_sync,
        placement_conditions=r.get_placement_conditions(drpc),
        resource_conditions=r.get_resource_conditions(drpc),
        name=r.get_name(drpc),
        namespace=r.get_namespace(drpc),
        replication_mode=mode,
        progression=r.get_progression(drpc),
    )
    return GroupStatus(group_name=group.name, context=ctx)


def most_severe_health(statuses: Iterable[GroupStatus]) -> ReplicationHealth:
    worst = ReplicationHealth.HEALTHY
    for status in statuses:
        if status.volume_replication_health.severity > worst.severity:
            worst = status.volume_replication_health
    return worst


def select_worst_and_representative(
    statuses: list[GroupStatus],
) -> Optional[tuple[ReplicationHealth, GroupStatus]]:
    """Worst volume health plus the group whose details are surfaced.

    The representative is the first group in transition (failing over or
    relocating), else the first group. None when there are no groups.
    """
    if not statuses:
        return None
    representative = next((s for s in statuses if s.phase in _IN_TRANSITION), statuses[0])
    return most_severe_health(statuses), representative


def normalize_subscription(
    application: WatchResult[Resource],
    groups: WatchResult[list[SubscriptionGroup]],
    now: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> ContextResult:
    if not all_ready(application, groups):
        return ContextResult.loading()
    if not application.data:
        return ContextResult.no_context()

    statuses = [
        status
        for status in (classify_group(g, now, config) for g in groups.data or [])
        if status is not None
    ]
    selected = select_worst_and_representative(statuses)
    if selected is None:
        return ContextResult.no_context()

    worst, representative = selected
    logger.debug(
        "%s: %d protected group(s), worst %s, showing %s",
        r.get_name(application.data), len(statuses), worst.value, representative.group_name,
    )
    return ContextResult.ready(
        replace(
            representative.context,
            volume_replication_health=worst,
            name=r.get_name(application.data),
            namespace=r.get_namespace(application.data),
        )
    )


def groups_from_resources(
    drpcs: list[Resource],
    drpolicies: list[Resource],
    placement_refs: list[tuple[str, str]],
    namespace: str,
) -> list[SubscriptionGroup]:
    """Assemble subscription groups from their (kind, name) placement refs and DR resources."""
    groups = []
    for kind, placement_name in placement_refs:
        drpc = r.find_drpc_for_placement(drpcs, placement_name, namespace, kind or r.PLACEMENT_KIND)
        drpolicy = r.find_policy(drpolicies, r.get_policy_name(drpc)) if drpc else None
        groups.append(
            SubscriptionGroup(
                name=placement_name,
                drpc=drpc,
                drpolicy=drpolicy,
                dr_clusters=r.get_policy_clusters(drpolicy),
            )
        )
    return groups
