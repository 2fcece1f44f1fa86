"""Status detail builder - maps a resolved status onto a display payload."""
from __future__ import annotations

import enum
import logging
from typing import Optional

from .conditions import TimeFormatter, build_condition_details, default_formatter
from .config import EngineConfig, resolve_config
from .health import parse_timestamp
from .models import (
    ClusterDetails,
    DetailSection,
    DRContext,
    DRPhase,
    DRStatus,
    DRStatusView,
    HelpLink,
    IconKey,
    PolicyDetails,
    ReplicationHealth,
    SyncStatus,
)

logger = logging.getLogger("drstatus.engine.details")


class Attribution(str, enum.Enum):
    VOLUME = "volume"
    KUBE_OBJECT = "kube_object"
    BOTH = "both"


_AFFECTED_HINT = "Check the network connection, cluster health, or workload status for potential issues."

# (grade, attribution) -> (title, message)
HEALTH_TEMPLATES: dict[tuple[ReplicationHealth, Attribution], tuple[str, str]] = {
    (ReplicationHealth.WARNING, Attribution.VOLUME): (
        "Volumes are syncing slower than usual",
        f"1 or more volume groups are affected. {_AFFECTED_HINT}",
    ),
    (ReplicationHealth.WARNING, Attribution.KUBE_OBJECT): (
        "Kubernetes resources are syncing slower than usual",
        f"1 or more Kubernetes resources are affected. {_AFFECTED_HINT}",
    ),
    (ReplicationHealth.WARNING, Attribution.BOTH): (
        "Volumes & Kubernetes resources are syncing slower than usual",
        f"1 or more volumes & Kubernetes resources are affected. {_AFFECTED_HINT}",
    ),
    (ReplicationHealth.CRITICAL, Attribution.VOLUME): (
        "Volumes are not syncing",
        f"1 or more volume groups are affected. {_AFFECTED_HINT}",
    ),
    (ReplicationHealth.CRITICAL, Attribution.KUBE_OBJECT): (
        "Kubernetes resources are not syncing",
        f"1 or more Kubernetes resources are affected. {_AFFECTED_HINT}",
    ),
    (ReplicationHealth.CRITICAL, Attribution.BOTH): (
        "Volumes & Kubernetes resources are not syncing",
        f"1 or more volumes & Kubernetes resources are affected. {_AFFECTED_HINT}",
    ),
}

UNKNOWN_TITLE = "Status unknown"
UNKNOWN_MESSAGE = "The current status could not be determined."
NO_DATA = "No data available"

STATUS_ICONS = {
    DRStatus.WAIT_ON_USER_CLEANUP: IconKey.RED_EXCLAMATION,
    DRStatus.FAILING_OVER: IconKey.IN_PROGRESS,
    DRStatus.RELOCATING: IconKey.IN_PROGRESS,
    DRStatus.CRITICAL: IconKey.RED_EXCLAMATION,
    DRStatus.WARNING: IconKey.YELLOW_EXCLAMATION,
    DRStatus.HEALTHY: IconKey.GREEN_CHECK,
}

# status -> (docs anchor, link label)
HELP_LINKS = {
    DRStatus.WARNING: ("volume-sync-delay", "Documentation help link"),
    DRStatus.CRITICAL: ("volume-sync-delay", "Documentation help link"),
    DRStatus.FAILING_OVER: ("failover", "Learn about different failover status"),
    DRStatus.RELOCATING: ("relocate", "Learn about different relocate status"),
}

_GRADE_FOR_STATUS = {
    DRStatus.WARNING: ReplicationHealth.WARNING,
    DRStatus.CRITICAL: ReplicationHealth.CRITICAL,
}


def attribute(grade: ReplicationHealth, ctx: DRContext) -> Optional[Attribution]:
    """Which signal(s) sit at ``grade``; None when neither does."""
    volume = ctx.volume_replication_health == grade
    kube = ctx.kube_object_replication_health == grade
    if volume and kube:
        return Attribution.BOTH
    if volume:
        return Attribution.VOLUME
    if kube:
        return Attribution.KUBE_OBJECT
    return None


def help_link(status: DRStatus, config: EngineConfig) -> Optional[HelpLink]:
    entry = HELP_LINKS.get(status)
    if entry is None:
        return None
    anchor, label = entry
    return HelpLink(href=config.docs_url(anchor), label=label)


def sync_details(ctx: DRContext, formatter: TimeFormatter) -> tuple[SyncStatus, ...]:
    def _last_synced(value: Optional[str]) -> str:
        ts = parse_timestamp(value)
        return formatter(ts) if ts else NO_DATA

    rows = [
        SyncStatus(
            label="Application volumes (PVCs):",
            last_synced=_last_synced(ctx.volume_last_sync_time),
            health=ctx.volume_replication_health,
        )
    ]
    if ctx.has_kube_object_protection:
        rows.append(
            SyncStatus(
                label="Kubernetes resources:",
                last_synced=_last_synced(ctx.last_kube_object_protection_time),
                health=ctx.kube_object_replication_health,
            )
        )
    return tuple(rows)


_FAILOVER_PHASES = (DRPhase.FAILING_OVER, DRPhase.FAILED_OVER)


def cleanup_message(ctx: DRContext) -> str:
    # after a failover the stale resources sit on the cluster the app left
    if ctx.phase in _FAILOVER_PHASES:
        return f"Clean up application resources on failed cluster {ctx.target_cluster}."
    return (
        f"Clean up application resources on the primary cluster {ctx.primary_cluster} "
        "to start relocating."
    )


def describe(
    status: DRStatus,
    ctx: DRContext,
    config: Optional[EngineConfig] = None,
    formatter: Optional[TimeFormatter] = None,
) -> DRStatusView:
    cfg = resolve_config(config)
    fmt = formatter or default_formatter(cfg)
    common = dict(
        status=status,
        help_link=help_link(status, cfg),
        condition_details=tuple(build_condition_details(ctx, fmt)),
    )

    if status == DRStatus.WAIT_ON_USER_CLEANUP:
        return DRStatusView(
            icon=STATUS_ICONS[status],
            title="Action needed",
            message=cleanup_message(ctx),
            **common,
        )

    if status in (DRStatus.FAILING_OVER, DRStatus.RELOCATING):
        verb = "Failing over" if status == DRStatus.FAILING_OVER else "Relocating"
        return DRStatusView(
            icon=STATUS_ICONS[status],
            title=f"{verb} application to {ctx.target_cluster}",
            message="Deploying the application on the target cluster.",
            detail_section=DetailSection.CLUSTER_DETAILS,
            cluster_details=ClusterDetails(ctx.primary_cluster, ctx.target_cluster, status),
            **common,
        )

    sync = dict(
        detail_section=DetailSection.SYNC_DETAILS,
        sync_details=sync_details(ctx, fmt),
        policy_details=PolicyDetails(ctx.policy_name, ctx.scheduling_interval or "Unknown"),
    )

    if status == DRStatus.HEALTHY:
        title = (
            "All volumes & Kubernetes resources are synced"
            if ctx.has_kube_object_protection
            else "All volumes are synced"
        )
        return DRStatusView(icon=STATUS_ICONS[status], title=title, **sync, **common)

    grade = _GRADE_FOR_STATUS[status]
    attribution = attribute(grade, ctx)
    if attribution is None:
        logger.warning(
            "%s/%s resolved to %s but no signal is %s",
            ctx.namespace, ctx.name, status.value, grade.value,
        )
        return DRStatusView(
            icon=IconKey.UNKNOWN,
            title=UNKNOWN_TITLE,
            message=UNKNOWN_MESSAGE,
            **sync,
            **common,
        )

    title, message = HEALTH_TEMPLATES[(grade, attribution)]
    return DRStatusView(icon=STATUS_ICONS[status], title=title, message=message, **sync, **common)
