"""Concurrent dependency walk across several package sources.

Builds the candidate universe the resolver consumes. Every lookup fans out
to all sources at once and waits for every one of them: a fast source
with an adequate answer never preempts a slower source with a better one.
The walk finishes before resolution starts; it never interleaves with the
solver.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Sequence

from packsolve.core.dependency.models import PackageCandidate, PackageId
from packsolve.core.versioning import Version, VersionRange
from packsolve.remote.sources import PackageSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceMatch:
    """The best candidate for a lookup and the source that supplied it."""

    candidate: PackageCandidate
    source: PackageSource


class DependencyWalker:
    """Queries package sources concurrently.

    Args:
        sources: Sources in priority order. On duplicate (id, version)
            records the earlier source wins.
    """

    def __init__(self, sources: Sequence[PackageSource]) -> None:
        self._sources = list(sources)

    @property
    def sources(self) -> list[PackageSource]:
        return list(self._sources)

    async def find_match(
        self, package_id: PackageId | str, version_range: VersionRange
    ) -> SourceMatch | None:
        """Find the best match for *version_range* across all sources.

        Results are consumed in completion order and a result replaces the
        current best only if strictly better, so ties go to the source
        that answered first.

        Returns:
            The winning match, or None if no source has one.
        """
        package_id = PackageId.of(package_id)

        async def _query(source: PackageSource) -> tuple[PackageSource, PackageCandidate | None]:
            try:
                return source, await source.find_best_match(package_id, version_range)
            except Exception:
                logger.warning(
                    "Source %s failed looking up %s", source.name, package_id, exc_info=True
                )
                return source, None

        best: SourceMatch | None = None
        for finished in asyncio.as_completed([_query(s) for s in self._sources]):
            source, candidate = await finished
            if candidate is None:
                continue
            current = best.candidate.version if best else None
            if version_range.is_better(current, candidate.version):
                best = SourceMatch(candidate=candidate, source=source)

        if best is not None:
            logger.debug(
                "Best match for %s %s: %s from %s",
                package_id,
                version_range,
                best.candidate.version,
                best.source.name,
            )
        return best

    async def _list_everywhere(self, package_id: PackageId) -> list[PackageCandidate]:
        async def _query(source: PackageSource) -> list[PackageCandidate]:
            try:
                return await source.list_candidates(package_id)
            except Exception:
                logger.warning(
                    "Source %s failed listing %s", source.name, package_id, exc_info=True
                )
                return []

        per_source = await asyncio.gather(*(_query(s) for s in self._sources))

        merged: dict[Version, PackageCandidate] = {}
        for candidates in per_source:
            for candidate in candidates:
                merged.setdefault(candidate.version, candidate)
        return list(merged.values())

    async def collect(self, root_ids: Iterable[PackageId | str]) -> list[PackageCandidate]:
        """Gather every candidate reachable from *root_ids*.

        Walks identities breadth first; each identity is listed on all
        sources concurrently and every dependency identity of every
        version found is queued.

        Returns:
            The candidate universe sorted by (id, version).
        """
        queue: deque[PackageId] = deque()
        seen: set[PackageId] = set()
        for root_id in root_ids:
            root_id = PackageId.of(root_id)
            if root_id not in seen:
                seen.add(root_id)
                queue.append(root_id)

        universe: list[PackageCandidate] = []
        while queue:
            package_id = queue.popleft()
            candidates = await self._list_everywhere(package_id)
            logger.debug("Found %d candidates for %s", len(candidates), package_id)
            universe.extend(candidates)
            for candidate in candidates:
                for dependency in candidate.dependencies:
                    if dependency.id not in seen:
                        seen.add(dependency.id)
                        queue.append(dependency.id)

        universe.sort(key=lambda c: (c.id, c.version))
        return universe
