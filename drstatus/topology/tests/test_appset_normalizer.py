"""Tests for the ApplicationSet normalizer."""
from __future__ import annotations

from drstatus.engine.models import ContextState, DRPhase, ReplicationHealth
from drstatus.topology.appset import normalize_appset
from drstatus.topology.watch import WatchResult
from resource_factories import (
    ANCIENT,
    CFG,
    NOW,
    STALE,
    make_appset,
    make_drpc,
    make_drpolicy,
    make_placement,
)


def _loaded(data):
    return WatchResult(data=data, loaded=True)


def _normalize(appset=None, placements=None, drpcs=None, policies=None):
    return normalize_appset(
        appset or _loaded(make_appset()),
        placements or _loaded([make_placement()]),
        drpcs or _loaded([make_drpc()]),
        policies or _loaded([make_drpolicy()]),
        now=NOW,
        config=CFG,
    )


def test_ready_context():
    result = _normalize()
    assert result.state == ContextState.READY
    ctx = result.context
    assert ctx.name == "app"
    assert ctx.namespace == "app-ns"
    assert ctx.phase == DRPhase.DEPLOYED
    assert ctx.primary_cluster == "east-1"
    assert ctx.target_cluster == "west-1"
    assert ctx.policy_name == "policy-5m"
    assert ctx.scheduling_interval == "5m"
    assert ctx.volume_replication_health == ReplicationHealth.HEALTHY
    assert ctx.kube_object_replication_health is None


def test_primary_is_last_deployment_cluster_even_after_failover():
    drpc = make_drpc(phase="FailedOver", deployed_on="west-1", failoverCluster="west-1")
    ctx = _normalize(drpcs=_loaded([drpc])).context
    assert ctx.primary_cluster == "west-1"
    assert ctx.target_cluster == "east-1"


def test_stale_sync_and_kube_objects():
    drpc = make_drpc(last_sync=STALE, capture_interval="5m", last_kube_protection=ANCIENT)
    ctx = _normalize(drpcs=_loaded([drpc])).context
    assert ctx.volume_replication_health == ReplicationHealth.WARNING
    assert ctx.kube_object_replication_health == ReplicationHealth.CRITICAL


def test_cleanup_flag():
    drpc = make_drpc(phase="FailedOver", progression="WaitOnUserToCleanUp")
    assert _normalize(drpcs=_loaded([drpc])).context.is_cleanup_required is True


def test_loading_while_any_watch_pending():
    pending = WatchResult(loaded=False)
    assert _normalize(appset=pending).state == ContextState.LOADING
    assert _normalize(placements=pending).state == ContextState.LOADING
    assert _normalize(drpcs=pending).state == ContextState.LOADING
    assert _normalize(policies=pending).state == ContextState.LOADING


def test_loading_on_watch_error():
    failed = WatchResult(loaded=True, load_error="forbidden")
    assert _normalize(drpcs=failed).state == ContextState.LOADING


def test_no_context_without_placement_generator():
    appset = make_appset()
    appset["spec"]["generators"] = [{"list": {"elements": []}}]
    assert _normalize(appset=_loaded(appset)).state == ContextState.NO_CONTEXT


def test_no_context_without_matching_placement():
    result = _normalize(placements=_loaded([make_placement(name="someone-else")]))
    assert result.state == ContextState.NO_CONTEXT


def test_no_context_without_drpc():
    result = _normalize(drpcs=_loaded([make_drpc(placement="unrelated")]))
    assert result.state == ContextState.NO_CONTEXT


def test_no_context_without_policy():
    result = _normalize(policies=_loaded([make_drpolicy(name="other")]))
    assert result.state == ContextState.NO_CONTEXT


def test_missing_appset_is_no_context():
    assert _normalize(appset=_loaded(None)).state == ContextState.NO_CONTEXT
