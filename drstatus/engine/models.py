"""DR status engine - data models."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional


class ReplicationHealth(str, enum.Enum):
    HEALTHY = "HEALTHY"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"

    @property
    def severity(self) -> int:
        return _HEALTH_SEVERITY[self]


_HEALTH_SEVERITY = {
    ReplicationHealth.HEALTHY: 0,
    ReplicationHealth.WARNING: 1,
    ReplicationHealth.CRITICAL: 2,
}


class ReplicationMode(str, enum.Enum):
    SYNC = "sync"    # metro DR, no schedule
    ASYNC = "async"  # regional DR, scheduled


class DRPhase(str, enum.Enum):
    DEPLOYED = "Deployed"
    FAILING_OVER = "FailingOver"
    FAILED_OVER = "FailedOver"
    RELOCATING = "Relocating"
    RELOCATED = "Relocated"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[DRPhase]:
        """Return the phase for a placement-control status string, or None."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class DRStatus(str, enum.Enum):
    """Resolved status, declared from highest to lowest precedence."""

    WAIT_ON_USER_CLEANUP = "WaitOnUserToCleanUp"
    FAILING_OVER = "FailingOver"
    RELOCATING = "Relocating"
    CRITICAL = "Critical"
    WARNING = "Warning"
    HEALTHY = "Healthy"

    @property
    def precedence(self) -> int:
        members = list(type(self))
        return len(members) - members.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DRStatus):
            return NotImplemented
        return self.precedence < other.precedence

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, DRStatus):
            return NotImplemented
        return self.precedence > other.precedence

    def __le__(self, other: object) -> bool:
        if not isinstance(other, DRStatus):
            return NotImplemented
        return self.precedence <= other.precedence

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, DRStatus):
            return NotImplemented
        return self.precedence >= other.precedence


class IconKey(str, enum.Enum):
    RED_EXCLAMATION = "red-exclamation"
    YELLOW_EXCLAMATION = "yellow-exclamation"
    GREEN_CHECK = "green-check"
    IN_PROGRESS = "in-progress"
    UNKNOWN = "unknown"


class DetailSection(str, enum.Enum):
    CLUSTER_DETAILS = "clusterDetails"
    SYNC_DETAILS = "syncDetails"
    NONE = "none"


@dataclass(frozen=True)
class Condition:
    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Condition:
        return cls(
            type=raw.get("type") or "",
            status=raw.get("status") or "",
            reason=raw.get("reason") or "",
            message=raw.get("message") or "",
            last_transition_time=raw.get("lastTransitionTime") or None,
        )


@dataclass(frozen=True)
class DRContext:
    """Canonical per-workload input to the resolver, rebuilt on every update."""

    phase: Optional[DRPhase]
    volume_replication_health: ReplicationHealth
    is_cleanup_required: bool = False
    # None means object-level protection is not configured
    kube_object_replication_health: Optional[ReplicationHealth] = None
    primary_cluster: str = ""
    target_cluster: str = ""
    policy_name: str = ""
    scheduling_interval: str = ""
    volume_last_sync_time: Optional[str] = None
    last_kube_object_protection_time: Optional[str] = None
    placement_conditions: tuple[Condition, ...] = ()
    resource_conditions: tuple[Condition, ...] = ()
    name: str = ""
    namespace: str = ""
    replication_mode: ReplicationMode = ReplicationMode.ASYNC
    progression: Optional[str] = None
    protected_condition: Optional[Condition] = None
    available_condition: Optional[Condition] = None

    @property
    def conditions(self) -> tuple[Condition, ...]:
        return self.placement_conditions + self.resource_conditions

    @property
    def has_kube_object_protection(self) -> bool:
        return self.kube_object_replication_health is not None


class ContextState(str, enum.Enum):
    LOADING = "loading"
    NO_CONTEXT = "no_context"
    READY = "ready"


@dataclass(frozen=True)
class ContextResult:
    """Normalizer outcome: loading, no DR relationship, or a ready context."""

    state: ContextState
    context: Optional[DRContext] = None

    @classmethod
    def loading(cls) -> ContextResult:
        return cls(ContextState.LOADING)

    @classmethod
    def no_context(cls) -> ContextResult:
        return cls(ContextState.NO_CONTEXT)

    @classmethod
    def ready(cls, context: DRContext) -> ContextResult:
        return cls(ContextState.READY, context)

    @property
    def is_ready(self) -> bool:
        return self.state == ContextState.READY and self.context is not None


@dataclass(frozen=True)
class ClusterDetails:
    primary_cluster: str
    target_cluster: str
    status: DRStatus


@dataclass(frozen=True)
class SyncStatus:
    label: str
    last_synced: str
    health: Optional[ReplicationHealth]


@dataclass(frozen=True)
class PolicyDetails:
    policy_name: str
    scheduling_interval: str

    @property
    def text(self) -> str:
        return f"{self.policy_name}, sync every {self.scheduling_interval}"


@dataclass(frozen=True)
class HelpLink:
    href: str
    label: str


@dataclass(frozen=True)
class DRStatusView:
    status: DRStatus
    icon: IconKey
    title: str
    message: Optional[str] = None
    detail_section: DetailSection = DetailSection.NONE
    cluster_details: Optional[ClusterDetails] = None
    sync_details: tuple[SyncStatus, ...] = ()
    policy_details: Optional[PolicyDetails] = None
    help_link: Optional[HelpLink] = None
    condition_details: tuple[str, ...] = ()
