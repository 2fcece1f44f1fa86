"""DR status engine - classify, resolve and describe protected workload status."""
from .conditions import build_condition_details, build_detail_list, is_not_true, is_not_true_and_used
from .config import ConfigValidationError, EngineConfig, setup_logging
from .details import describe
from .health import IntervalParseError, classify, parse_interval, worst_health
from .models import (
    Condition,
    ContextResult,
    ContextState,
    DetailSection,
    DRContext,
    DRPhase,
    DRStatus,
    DRStatusView,
    IconKey,
    ReplicationHealth,
    ReplicationMode,
)
from .resolver import resolve
from .status import StatusEngine

__all__ = [
    "Condition",
    "ConfigValidationError",
    "ContextResult",
    "ContextState",
    "DetailSection",
    "DRContext",
    "DRPhase",
    "DRStatus",
    "DRStatusView",
    "EngineConfig",
    "IconKey",
    "IntervalParseError",
    "ReplicationHealth",
    "ReplicationMode",
    "StatusEngine",
    "build_condition_details",
    "build_detail_list",
    "classify",
    "describe",
    "is_not_true",
    "is_not_true_and_used",
    "parse_interval",
    "resolve",
    "setup_logging",
    "worst_health",
]
