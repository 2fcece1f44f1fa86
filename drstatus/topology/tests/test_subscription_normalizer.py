"""Tests for the subscription normalizer and its cross-group reduction."""
from __future__ import annotations

import pytest

from drstatus.engine.models import (
    ContextState,
    DRContext,
    DRPhase,
    ReplicationHealth,
)
from drstatus.topology.resources import get_subscription_placement_ref
from drstatus.topology.subscription import (
    GroupStatus,
    SubscriptionGroup,
    classify_group,
    groups_from_resources,
    most_severe_health,
    normalize_subscription,
    select_worst_and_representative,
)
from drstatus.topology.watch import WatchResult
from resource_factories import ANCIENT, CFG, FRESH, NOW, STALE, make_drpc, make_drpolicy

H, W, C = ReplicationHealth.HEALTHY, ReplicationHealth.WARNING, ReplicationHealth.CRITICAL
APP = {"kind": "Application", "metadata": {"name": "busybox", "namespace": "busybox-ns"}}


def _status(name: str, health: ReplicationHealth, phase=DRPhase.DEPLOYED) -> GroupStatus:
    return GroupStatus(
        group_name=name,
        context=DRContext(phase=phase, volume_replication_health=health, name=name),
    )


def _group(name: str, last_sync=FRESH, phase="Deployed", **kwargs) -> SubscriptionGroup:
    return SubscriptionGroup(
        name=name,
        drpc=make_drpc(name=f"{name}-drpc", placement=name, last_sync=last_sync, phase=phase, **kwargs),
        drpolicy=make_drpolicy(),
        dr_clusters=["east-1", "west-1"],
    )


# ---------------------------------------------------------------------------
# select_worst_and_representative
# ---------------------------------------------------------------------------

def test_reduction_healthy_warning_critical_is_critical():
    statuses = [_status("a", H), _status("b", W), _status("c", C)]
    worst, representative = select_worst_and_representative(statuses)
    assert worst == C
    assert representative.group_name == "a"


@pytest.mark.parametrize(
    "grades,expected",
    [([H, H], H), ([H, W], W), ([W, H, W], W), ([C, H], C), ([], H)],
)
def test_most_severe_health(grades, expected):
    assert most_severe_health([_status(str(i), g) for i, g in enumerate(grades)]) == expected


def test_representative_prefers_group_in_transition():
    statuses = [
        _status("a", H),
        _status("b", C, phase=DRPhase.RELOCATING),
        _status("c", W, phase=DRPhase.FAILING_OVER),
    ]
    worst, representative = select_worst_and_representative(statuses)
    assert worst == C
    assert representative.group_name == "b"


def test_representative_defaults_to_first_group():
    statuses = [_status("a", W, phase=DRPhase.FAILED_OVER), _status("b", H)]
    _, representative = select_worst_and_representative(statuses)
    assert representative.group_name == "a"


def test_no_groups_selects_nothing():
    assert select_worst_and_representative([]) is None


# ---------------------------------------------------------------------------
# classify_group
# ---------------------------------------------------------------------------

def test_classify_group_builds_context():
    status = classify_group(_group("g1", last_sync=STALE), NOW, CFG)
    ctx = status.context
    assert status.group_name == "g1"
    assert ctx.volume_replication_health == W
    assert ctx.primary_cluster == "east-1"
    assert ctx.target_cluster == "west-1"
    assert ctx.policy_name == "policy-5m"
    assert ctx.kube_object_replication_health is None


def test_classify_group_skips_unprotected_group():
    assert classify_group(SubscriptionGroup(name="plain"), NOW, CFG) is None


def test_classify_group_skips_group_without_clusters():
    group = _group("g1")
    group.dr_clusters = []
    assert classify_group(group, NOW, CFG) is None


def test_classify_group_cleanup():
    group = _group("g1", phase="Relocating", progression="WaitOnUserToCleanUp")
    assert classify_group(group, NOW, CFG).context.is_cleanup_required is True


# ---------------------------------------------------------------------------
# normalize_subscription
# ---------------------------------------------------------------------------

def _normalize(groups, app=APP):
    return normalize_subscription(
        WatchResult(data=app, loaded=True),
        WatchResult(data=groups, loaded=True),
        now=NOW,
        config=CFG,
    )


def test_normalize_reports_worst_health_with_representative_details():
    groups = [
        _group("g1", last_sync=FRESH),
        _group("g2", last_sync=STALE),
        _group("g3", last_sync=ANCIENT, deployed_on="west-1"),
    ]
    result = _normalize(groups)
    assert result.state == ContextState.READY
    ctx = result.context
    assert ctx.volume_replication_health == C
    assert ctx.volume_last_sync_time == FRESH
    assert ctx.primary_cluster == "east-1"
    assert ctx.name == "busybox"
    assert ctx.namespace == "busybox-ns"


def test_normalize_surfaces_failing_over_group():
    groups = [_group("g1"), _group("g2", phase="FailingOver", deployed_on="west-1")]
    ctx = _normalize(groups).context
    assert ctx.phase == DRPhase.FAILING_OVER
    assert ctx.primary_cluster == "west-1"
    assert ctx.target_cluster == "east-1"


def test_normalize_ignores_unprotected_groups():
    groups = [SubscriptionGroup(name="plain"), _group("g1", last_sync=STALE)]
    assert _normalize(groups).context.volume_replication_health == W


def test_normalize_no_protected_groups():
    assert _normalize([SubscriptionGroup(name="plain")]).state == ContextState.NO_CONTEXT
    assert _normalize([]).state == ContextState.NO_CONTEXT


def test_normalize_missing_application():
    assert _normalize([_group("g1")], app=None).state == ContextState.NO_CONTEXT


def test_normalize_loading():
    result = normalize_subscription(
        WatchResult(data=APP, loaded=True), WatchResult(loaded=False), now=NOW, config=CFG
    )
    assert result.state == ContextState.LOADING
    result = normalize_subscription(
        WatchResult(loaded=True, load_error="boom"),
        WatchResult(data=[], loaded=True),
        now=NOW,
        config=CFG,
    )
    assert result.state == ContextState.LOADING


def test_groups_from_resources():
    drpcs = [make_drpc(name="g1-drpc", placement="g1", namespace="busybox-ns")]
    policies = [make_drpolicy()]
    groups = groups_from_resources(
        drpcs, policies, [("Placement", "g1"), ("Placement", "g2")], "busybox-ns"
    )
    assert [g.name for g in groups] == ["g1", "g2"]
    assert groups[0].drpc is drpcs[0]
    assert groups[0].dr_clusters == ["east-1", "west-1"]
    assert groups[1].drpc is None
    assert groups[1].dr_clusters == []


def test_groups_from_resources_matches_placement_rule():
    drpc = make_drpc(
        name="g1-drpc", placement="g1", placement_kind="PlacementRule", namespace="busybox-ns"
    )
    groups = groups_from_resources([drpc], [make_drpolicy()], [("PlacementRule", "g1")], "busybox-ns")
    assert groups[0].drpc is drpc
    assert groups[0].dr_clusters == ["east-1", "west-1"]


def test_groups_from_resources_kind_must_match():
    drpc = make_drpc(name="g1-drpc", placement="g1", namespace="busybox-ns")
    groups = groups_from_resources([drpc], [make_drpolicy()], [("PlacementRule", "g1")], "busybox-ns")
    assert groups[0].drpc is None


def test_placement_rule_app_is_normalized():
    drpc = make_drpc(
        name="g1-drpc",
        placement="g1",
        placement_kind="PlacementRule",
        namespace="busybox-ns",
        last_sync=STALE,
    )
    subscription = {
        "kind": "Subscription",
        "metadata": {"name": "busybox-sub", "namespace": "busybox-ns"},
        "spec": {"placement": {"placementRef": {"kind": "PlacementRule", "name": "g1"}}},
    }
    refs = [get_subscription_placement_ref(subscription)]
    groups = groups_from_resources([drpc], [make_drpolicy()], refs, "busybox-ns")
    result = _normalize(groups)
    assert result.state == ContextState.READY
    assert result.context.volume_replication_health == W
