"""Resource-watch results and a static snapshot provider."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

import yaml

logger = logging.getLogger("drstatus.topology.watch")

T = TypeVar("T")

Resource = dict[str, Any]


@dataclass(frozen=True)
class WatchResult(Generic[T]):
    """One watched resource (or list), as handed over by the host's watch layer."""

    data: Optional[T] = None
    loaded: bool = False
    load_error: Optional[Any] = None

    @property
    def ready(self) -> bool:
        return self.loaded and not self.load_error


def all_ready(*results: WatchResult[Any]) -> bool:
    for result in results:
        if not result.ready:
            if result.load_error:
                logger.debug("Watch failed: %s", result.load_error)
            return False
    return True


@dataclass
class SnapshotWatch:
    """Serves resources from a fixed snapshot, keyed by kind.

    Used for tests and for evaluating exported cluster state offline; kinds
    listed in ``errors`` report a load error instead of data.
    """

    resources: dict[str, list[Resource]] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    def list(self, kind: str, namespace: Optional[str] = None) -> WatchResult[list[Resource]]:
        if kind in self.errors:
            return WatchResult(data=None, loaded=False, load_error=self.errors[kind])
        items = [
            r for r in self.resources.get(kind, [])
            if namespace is None or r.get("metadata", {}).get("namespace") == namespace
        ]
        return WatchResult(data=items, loaded=True)

    def get(self, kind: str, name: str, namespace: Optional[str] = None) -> WatchResult[Resource]:
        listed = self.list(kind, namespace)
        if not listed.ready:
            return WatchResult(data=None, loaded=listed.loaded, load_error=listed.load_error)
        for r in listed.data or []:
            if r.get("metadata", {}).get("name") == name:
                return WatchResult(data=r, loaded=True)
        return WatchResult(data=None, loaded=True)

    @classmethod
    def from_yaml(cls, path: str) -> SnapshotWatch:
        """Load a multi-document YAML export (``kubectl get -o yaml`` lists work too)."""
        resources: dict[str, list[Resource]] = {}
        with open(path, "r") as f:
            for doc in yaml.safe_load_all(f):
                if not doc:
                    continue
                items = doc.get("items", []) if doc.get("kind") == "List" else [doc]
                for item in items:
                    resources.setdefault(item.get("kind", ""), []).append(item)
        logger.info("Loaded snapshot %s (%d kinds)", path, len(resources))
        return cls(resources=resources)
