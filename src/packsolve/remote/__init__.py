"""Candidate collection from one or more package sources.

Public API::

    from packsolve.remote import DependencyWalker, LocalPackageSource, PackageSource
"""

from __future__ import annotations

from packsolve.remote.sources import LocalPackageSource, PackageSource
from packsolve.remote.walker import DependencyWalker, SourceMatch

__all__ = [
    "DependencyWalker",
    "LocalPackageSource",
    "PackageSource",
    "SourceMatch",
]
