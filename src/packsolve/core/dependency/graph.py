"""Graph algorithms over a chosen install set.

- Cycle detection via an iterative DFS, reporting the first
  cycle as a closed path.
- Topological ordering (dependencies first) via Kahn's algorithm with
  ordinal tie-breaking.
- Multi-source BFS distances from the target identities, used to rank
  failure diagnostics.

All functions treat absent placeholders as having no outgoing edges and
ignore dependency targets that are not part of the given package set.
"""

from __future__ import annotations

import heapq
from collections import deque
from typing import Iterable, Sequence

from packsolve.core.dependency.models import PackageId, ResolverPackage

# Distance reported for identities no target can reach.
MAX_DISTANCE = 20


def _index_by_id(packages: Iterable[ResolverPackage]) -> dict[PackageId, ResolverPackage]:
    index: dict[PackageId, ResolverPackage] = {}
    for package in packages:
        if not package.absent:
            index.setdefault(package.id, package)
    return index


def find_circular_dependency(solution: Sequence[ResolverPackage]) -> list[ResolverPackage]:
    """Find a dependency cycle among the non-absent packages of *solution*.

    Packages are visited in identity order and their dependencies in
    declaration order, so the reported cycle is deterministic. The path
    starts at the first package of the cycle to enter the DFS stack and
    ends with that same package again, e.g. ``a => b => a``.

    Args:
        solution: A chosen package set, absent entries allowed.

    Returns:
        The closed cycle path, or an empty list if the set is acyclic.
    """
    by_id = _index_by_id(solution)

    WHITE, GRAY, BLACK = 0, 1, 2
    color: dict[PackageId, int] = {package_id: WHITE for package_id in by_id}

    for root_id in sorted(by_id):
        if color[root_id] != WHITE:
            continue
        # Explicit frames of remaining dependencies, parallel to path.
        path: list[ResolverPackage] = [by_id[root_id]]
        on_path: dict[PackageId, int] = {root_id: 0}
        frames = [iter(by_id[root_id].dependencies)]
        color[root_id] = GRAY
        while frames:
            dependency = next(frames[-1], None)
            if dependency is None:
                frames.pop()
                finished = path.pop()
                del on_path[finished.id]
                color[finished.id] = BLACK
                continue
            target = by_id.get(dependency.id)
            if target is None:
                continue
            if color[target.id] == GRAY:
                return path[on_path[target.id]:] + [target]
            if color[target.id] == WHITE:
                color[target.id] = GRAY
                on_path[target.id] = len(path)
                path.append(target)
                frames.append(iter(target.dependencies))
    return []


def topological_sort(packages: Sequence[ResolverPackage]) -> list[ResolverPackage]:
    """Order *packages* so every dependency precedes its dependents.

    Among packages whose dependencies are all placed, the one with the
    lowest identity goes next. Absent entries are dropped. Packages caught
    in a cycle, which the resolver rejects earlier, are appended in
    identity order.
    """
    by_id = _index_by_id(packages)

    waiting_on: dict[PackageId, set[PackageId]] = {}
    dependents: dict[PackageId, list[PackageId]] = {package_id: [] for package_id in by_id}
    for package_id, package in by_id.items():
        needs = {d.id for d in package.dependencies if d.id in by_id and d.id != package_id}
        waiting_on[package_id] = needs
        for dependency_id in needs:
            dependents[dependency_id].append(package_id)

    ready = [package_id for package_id, needs in waiting_on.items() if not needs]
    heapq.heapify(ready)
    ordered: list[ResolverPackage] = []

    while ready:
        package_id = heapq.heappop(ready)
        ordered.append(by_id[package_id])
        for dependent_id in dependents[package_id]:
            needs = waiting_on[dependent_id]
            needs.discard(package_id)
            if not needs:
                heapq.heappush(ready, dependent_id)

    if len(ordered) < len(by_id):
        placed = {package.id for package in ordered}
        ordered.extend(by_id[i] for i in sorted(by_id) if i not in placed)
    return ordered


def distances_from_targets(
    target_ids: Iterable[PackageId], packages: Iterable[ResolverPackage]
) -> dict[PackageId, int]:
    """Compute the fewest dependency hops from any target to each identity.

    Edges run from a package to each identity it depends on; several
    versions of one identity contribute the union of their edges.
    Unreachable identities are absent from the result.
    """
    edges: dict[PackageId, set[PackageId]] = {}
    for package in packages:
        outgoing = edges.setdefault(package.id, set())
        for dependency in package.dependencies:
            outgoing.add(dependency.id)

    distances: dict[PackageId, int] = {}
    queue: deque[PackageId] = deque()
    for target_id in target_ids:
        if target_id not in distances:
            distances[target_id] = 0
            queue.append(target_id)

    while queue:
        current = queue.popleft()
        for next_id in edges.get(current, ()):
            if next_id not in distances:
                distances[next_id] = distances[current] + 1
                queue.append(next_id)
    return distances


def lowest_distance_from_target(
    package_id: PackageId | str,
    target_ids: Iterable[PackageId | str],
    packages: Iterable[ResolverPackage],
) -> int:
    """Return the hop count from the nearest target, capped at ``MAX_DISTANCE``."""
    distances = distances_from_targets(
        (PackageId.of(t) for t in target_ids), packages
    )
    return min(distances.get(PackageId.of(package_id), MAX_DISTANCE), MAX_DISTANCE)
