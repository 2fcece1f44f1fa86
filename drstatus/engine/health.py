"""Replication health classifier.

Grades how stale the last successful sync is relative to the expected
scheduling interval: within one interval is HEALTHY, up to the critical
multiplier is WARNING, anything older (or never synced) is CRITICAL.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from .config import EngineConfig, resolve_config
from .models import ReplicationHealth, ReplicationMode

logger = logging.getLogger("drstatus.engine.health")

Clock = Callable[[], datetime]

_INTERVAL_RE = re.compile(r"^\s*(\d+)\s*([mhd]?)\s*$")
_UNIT_SECONDS = {"m": 60, "h": 3600, "d": 86400}


class IntervalParseError(ValueError):
    """Raised when a scheduling interval string cannot be understood."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware ones are returned unchanged."""
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def parse_interval(value: str) -> timedelta:
    """Parse "5m" / "1h" / "2d" (bare numbers are minutes) into a timedelta."""
    match = _INTERVAL_RE.match(value or "")
    if not match:
        raise IntervalParseError(f"unparsable scheduling interval {value!r}")
    amount, unit = int(match.group(1)), match.group(2) or "m"
    if amount <= 0:
        raise IntervalParseError(f"scheduling interval must be positive, got {value!r}")
    return timedelta(seconds=amount * _UNIT_SECONDS[unit])


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as emitted by the API server; None if unusable."""
    if not value:
        return None
    if isinstance(value, datetime):
        # YAML loaders hand back unquoted timestamps already parsed
        ts = value
    else:
        try:
            ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except (AttributeError, ValueError):
            return None
    return as_utc(ts)


def sync_ratio(
    last_sync_time: Optional[str],
    scheduling_interval: str,
    now: Optional[datetime] = None,
) -> float:
    """Elapsed time since the last sync, in multiples of the interval.

    Never-synced workloads are infinitely stale. Raises IntervalParseError.
    """
    interval = parse_interval(scheduling_interval)
    last_sync = parse_timestamp(last_sync_time)
    if last_sync is None:
        return float("inf")
    elapsed = as_utc(now or utcnow()) - last_sync
    return elapsed.total_seconds() / interval.total_seconds()


def classify(
    last_sync_time: Optional[str],
    scheduling_interval: str,
    replication_mode: ReplicationMode = ReplicationMode.ASYNC,
    now: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> ReplicationHealth:
    """Grade one replication stream (volume data or object metadata)."""
    if replication_mode == ReplicationMode.SYNC:
        return ReplicationHealth.HEALTHY

    cfg = resolve_config(config)
    try:
        ratio = sync_ratio(last_sync_time, scheduling_interval, now)
    except IntervalParseError as exc:
        logger.warning("Treating replication as critical: %s", exc)
        return ReplicationHealth.CRITICAL

    if ratio <= cfg.warning_multiplier:
        return ReplicationHealth.HEALTHY
    if ratio <= cfg.critical_multiplier:
        return ReplicationHealth.WARNING
    return ReplicationHealth.CRITICAL


def worst_health(grades: Iterable[Optional[ReplicationHealth]]) -> Optional[ReplicationHealth]:
    """Most severe present grade; None when no grade is present."""
    present = [g for g in grades if g is not None]
    if not present:
        return None
    return max(present, key=lambda g: g.severity)
