"""StatusEngine - binds config, clock and time formatting to the pure operations."""
from __future__ import annotations

import logging
from typing import Optional

from . import details, health, resolver
from .conditions import TimeFormatter, default_formatter
from .config import EngineConfig, resolve_config
from .health import Clock
from .models import (
    ContextResult,
    DRContext,
    DRStatus,
    DRStatusView,
    ReplicationHealth,
    ReplicationMode,
)

logger = logging.getLogger("drstatus.engine.status")


class StatusEngine:
    """Stateless apart from its collaborators; safe to share across workloads."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
        formatter: Optional[TimeFormatter] = None,
    ) -> None:
        self.config = resolve_config(config)
        self.clock: Clock = clock or health.utcnow
        self.formatter: TimeFormatter = formatter or default_formatter(self.config)

    def classify(
        self,
        last_sync_time: Optional[str],
        scheduling_interval: str,
        replication_mode: ReplicationMode = ReplicationMode.ASYNC,
    ) -> ReplicationHealth:
        return health.classify(
            last_sync_time,
            scheduling_interval,
            replication_mode,
            now=self.clock(),
            config=self.config,
        )

    def resolve(self, ctx: DRContext) -> DRStatus:
        return resolver.resolve(ctx)

    def describe(self, status: DRStatus, ctx: DRContext) -> DRStatusView:
        return details.describe(status, ctx, self.config, self.formatter)

    def evaluate(self, result: ContextResult) -> Optional[DRStatusView]:
        """Status view for a normalizer result; None until a context is ready."""
        if not result.is_ready:
            logger.debug("No status to evaluate (%s)", result.state.value)
            return None
        ctx = result.context
        status = self.resolve(ctx)
        logger.debug("%s/%s resolved to %s", ctx.namespace, ctx.name, status.value)
        return self.describe(status, ctx)
