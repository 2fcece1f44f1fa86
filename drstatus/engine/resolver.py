"""Status precedence resolver.

Order: WaitOnUserCleanup -> FailingOver -> Relocating -> worst health grade.
Cleanup and in-flight transitions mask health grading entirely.
"""
from __future__ import annotations

import logging

from .health import worst_health
from .models import DRContext, DRPhase, DRStatus, ReplicationHealth

logger = logging.getLogger("drstatus.engine.resolver")

_HEALTH_TO_STATUS = {
    ReplicationHealth.CRITICAL: DRStatus.CRITICAL,
    ReplicationHealth.WARNING: DRStatus.WARNING,
    ReplicationHealth.HEALTHY: DRStatus.HEALTHY,
}


def resolve(ctx: DRContext) -> DRStatus:
    if ctx.is_cleanup_required:
        return DRStatus.WAIT_ON_USER_CLEANUP
    if ctx.phase == DRPhase.FAILING_OVER:
        return DRStatus.FAILING_OVER
    if ctx.phase == DRPhase.RELOCATING:
        return DRStatus.RELOCATING

    worst = worst_health(
        [ctx.volume_replication_health, ctx.kube_object_replication_health]
    )
    if worst is None:
        logger.warning(
            "No replication health signal for %s/%s, reporting critical",
            ctx.namespace, ctx.name,
        )
        return DRStatus.CRITICAL
    return _HEALTH_TO_STATUS[worst]
