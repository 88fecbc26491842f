"""Shared fixtures for packsolve tests."""

import pytest

from packsolve.core.dependency import PackageCandidate, PackageDependency


@pytest.fixture
def chain_universe() -> list[PackageCandidate]:
    """a 1.0.0 -> b (>= 1.0.0) -> c (>= 1.0.0), two versions of each dependency."""
    return [
        PackageCandidate("a", "1.0.0", [PackageDependency("b", "1.0.0")]),
        PackageCandidate("b", "1.0.0", [PackageDependency("c", "1.0.0")]),
        PackageCandidate("b", "2.0.0", [PackageDependency("c", "2.0.0")]),
        PackageCandidate("c", "1.0.0"),
        PackageCandidate("c", "2.0.0"),
    ]
