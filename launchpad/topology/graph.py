# launchpad/topology/graph.py
"""Resource dependency graph."""

from collections import deque
from typing import Dict, Iterator, List, Optional

from launchpad.core.errors import (
    DependencyCycleError,
    DuplicateResourceError,
    TopologyShapeError,
    UnknownDependencyError,
)
from launchpad.topology.resources import Network, Resource, Service


class Topology:
    """
    Insertion-ordered graph of resources keyed by logical id.

    Edges point from a resource to the resources it depends on.
    """

    def __init__(self, stack_id: str, region: str):
        self.stack_id = stack_id
        self.region = region
        self._resources: Dict[str, Resource] = {}

    # -------------------------
    # MEMBERSHIP
    # -------------------------

    def add(self, resource: Resource) -> Resource:
        """Add a resource and return it, so declarations can chain."""
        if resource.logical_id in self._resources:
            raise DuplicateResourceError(
                f"Resource {resource.logical_id} already declared"
            )
        self._resources[resource.logical_id] = resource
        return resource

    def get(self, logical_id: str) -> Optional[Resource]:
        return self._resources.get(logical_id)

    def resources(self) -> List[Resource]:
        return list(self._resources.values())

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources.values())

    def __len__(self) -> int:
        return len(self._resources)

    def __contains__(self, logical_id: str) -> bool:
        return logical_id in self._resources

    # -------------------------
    # EDGES
    # -------------------------

    def dependencies_of(self, logical_id: str) -> List[str]:
        return list(self._require(logical_id).dependency_ids())

    def dependents_of(self, logical_id: str) -> List[str]:
        self._require(logical_id)
        return [
            r.logical_id for r in self._resources.values()
            if logical_id in r.dependency_ids()
        ]

    def sources(self) -> List[str]:
        """Resources with no dependencies."""
        return [r.logical_id for r in self._resources.values() if not r.dependency_ids()]

    def sinks(self) -> List[str]:
        """Resources nothing depends on."""
        depended_on = {
            dep_id
            for r in self._resources.values()
            for dep_id in r.dependency_ids()
        }
        return [r.logical_id for r in self._resources.values() if r.logical_id not in depended_on]

    # -------------------------
    # VALIDATION
    # -------------------------

    def validate(self) -> None:
        """
        Check the declaration is structurally well formed.

        Raises:
            UnknownDependencyError: a dependency is not part of the graph
            DuplicateResourceError: a dependency conflicts with the declared resource
            DependencyCycleError: no realization order exists
            TopologyShapeError: the graph does not end in exactly one Service,
                or no Network is among its sources
        """
        for resource in self._resources.values():
            for dep_id in resource.dependency_ids():
                if dep_id not in self._resources:
                    raise UnknownDependencyError(
                        f"{resource.logical_id} depends on undeclared {dep_id}"
                    )

            for dep in resource.dependencies():
                if self._resources[dep.logical_id] != dep:
                    raise DuplicateResourceError(
                        f"{resource.logical_id} references a conflicting "
                        f"declaration of {dep.logical_id}"
                    )

        self.topological_order()
        self._check_shape()

    def _check_shape(self) -> None:
        sinks = self.sinks()
        if len(sinks) != 1 or not isinstance(self._resources[sinks[0]], Service):
            raise TopologyShapeError(
                f"Expected a single Service nothing depends on, found: {', '.join(sinks) or 'none'}"
            )

        if not any(isinstance(self._resources[lid], Network) for lid in self.sources()):
            raise TopologyShapeError("No Network among the resources without dependencies")

    def topological_order(self) -> List[Resource]:
        """Dependencies first; ties keep declaration order."""
        remaining = {
            logical_id: {d for d in r.dependency_ids() if d in self._resources}
            for logical_id, r in self._resources.items()
        }

        ready = deque(lid for lid, deps in remaining.items() if not deps)
        ordered: List[Resource] = []

        while ready:
            logical_id = ready.popleft()
            ordered.append(self._resources[logical_id])
            del remaining[logical_id]

            for other_id, deps in remaining.items():
                if logical_id in deps:
                    deps.discard(logical_id)
                    if not deps and other_id not in ready:
                        ready.append(other_id)

        if remaining:
            raise DependencyCycleError(remaining.keys())

        return ordered

    def _require(self, logical_id: str) -> Resource:
        resource = self._resources.get(logical_id)
        if resource is None:
            raise UnknownDependencyError(f"Resource {logical_id} not declared")
        return resource

    def __repr__(self) -> str:
        return f"<Topology(stack_id={self.stack_id}, resources={len(self)})>"
