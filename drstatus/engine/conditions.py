"""Condition aggregator - turns not-yet-satisfied conditions into detail lines."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from .config import EngineConfig, resolve_config
from .health import parse_timestamp
from .models import Condition, DRContext

ConditionPredicate = Callable[[Condition], bool]
TimeFormatter = Callable[[datetime], str]

CONDITION_TRUE = "True"
REASON_UNUSED = "Unused"
SEGMENT_SEPARATOR = " - "

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def is_not_true(condition: Condition) -> bool:
    """Placement-level filter."""
    return condition.status != CONDITION_TRUE


def is_not_true_and_used(condition: Condition) -> bool:
    """Resource-aggregate filter; "Unused" marks replication legs never provisioned."""
    return condition.status != CONDITION_TRUE and condition.reason != REASON_UNUSED


def default_formatter(config: Optional[EngineConfig] = None) -> TimeFormatter:
    time_format = resolve_config(config).time_format

    def _format(ts: datetime) -> str:
        return ts.astimezone(timezone.utc).strftime(time_format)

    return _format


def format_condition(condition: Condition, formatter: TimeFormatter) -> str:
    ts = parse_timestamp(condition.last_transition_time)
    heading = " / ".join(part for part in (condition.type, condition.reason) if part)
    segments = (formatter(ts) if ts else "", heading, condition.message)
    return SEGMENT_SEPARATOR.join(s for s in segments if s)


def build_detail_list(
    conditions: Iterable[Condition],
    predicate: ConditionPredicate,
    formatter: Optional[TimeFormatter] = None,
) -> list[str]:
    """Filter, order most recent first and format conditions.

    Missing or unparsable transition times sort as oldest; equal times keep
    their input order.
    """
    fmt = formatter or default_formatter()
    selected = [c for c in conditions if predicate(c)]
    ordered = sorted(
        selected,
        key=lambda c: parse_timestamp(c.last_transition_time) or _OLDEST,
        reverse=True,
    )
    lines = [format_condition(c, fmt) for c in ordered]
    return [line for line in lines if line]


def build_condition_details(
    ctx: DRContext,
    formatter: Optional[TimeFormatter] = None,
) -> list[str]:
    """Placement-level details first, then resource-aggregate details."""
    fmt = formatter or default_formatter()
    return (
        build_detail_list(ctx.placement_conditions, is_not_true, fmt)
        + build_detail_list(ctx.resource_conditions, is_not_true_and_used, fmt)
    )
