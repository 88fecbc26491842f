"""Package sources: where candidate records come from.

A package source answers two questions about an identity: which versions
exist (with their dependencies), and which version best matches a range.
Sources are structural: anything with a ``name`` and the two coroutines
below qualifies, no base class required.
"""

from __future__ import annotations

import asyncio
from typing import Iterable, Protocol, runtime_checkable

from packsolve.core.dependency.models import PackageCandidate, PackageId
from packsolve.core.versioning import VersionRange


@runtime_checkable
class PackageSource(Protocol):
    """Capability set of a package feed."""

    @property
    def name(self) -> str:
        """Human-readable source name, used in logs and match results."""
        ...

    async def list_candidates(self, package_id: PackageId) -> list[PackageCandidate]:
        """Return every version this source offers for *package_id*."""
        ...

    async def find_best_match(
        self, package_id: PackageId, version_range: VersionRange
    ) -> PackageCandidate | None:
        """Return this source's best version for *version_range*, if any."""
        ...


class LocalPackageSource:
    """An in-memory package source.

    Backs universe files loaded from disk and stands in for remote feeds
    in tests. An optional delay is awaited before every answer.

    Args:
        name: Source name.
        candidates: The packages this source offers.
        delay: Seconds to wait before answering each query.
    """

    def __init__(
        self,
        name: str,
        candidates: Iterable[PackageCandidate] = (),
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._delay = delay
        self._by_id: dict[PackageId, list[PackageCandidate]] = {}
        for candidate in candidates:
            self.add(candidate)

    @property
    def name(self) -> str:
        return self._name

    def add(self, candidate: PackageCandidate) -> None:
        """Offer one more candidate."""
        self._by_id.setdefault(candidate.id, []).append(candidate)

    async def _wait(self) -> None:
        if self._delay > 0:
            await asyncio.sleep(self._delay)

    async def list_candidates(self, package_id: PackageId) -> list[PackageCandidate]:
        await self._wait()
        return list(self._by_id.get(package_id, []))

    async def find_best_match(
        self, package_id: PackageId, version_range: VersionRange
    ) -> PackageCandidate | None:
        await self._wait()
        best: PackageCandidate | None = None
        for candidate in self._by_id.get(package_id, []):
            if version_range.is_better(best.version if best else None, candidate.version):
                best = candidate
        return best

    def __repr__(self) -> str:
        return f"LocalPackageSource({self._name!r})"
