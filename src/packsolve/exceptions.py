"""packsolve exception hierarchy.

All public exceptions inherit from PackSolveError, giving callers a single
base class to catch when they want to handle any packsolve-specific failure
without swallowing unrelated errors.

The resolver itself reports its three fatal outcomes as a ``Resolution``
value; these exceptions are what ``Resolution.raise_for_failure()`` turns
them into for callers that prefer exception-based control flow.
"""


class PackSolveError(Exception):
    """Base exception for all packsolve errors."""


class VersionParseError(PackSolveError, ValueError):
    """Raised when a version or version range string cannot be parsed.

    Covers malformed numeric parts, empty prerelease labels, unbalanced
    interval brackets, and inverted range bounds.
    """


class UniverseFileError(PackSolveError):
    """Raised when a universe file cannot be loaded.

    Covers unreadable files, unsupported suffixes, malformed YAML or JSON,
    and package entries missing their id or version.
    """


class ResolverInputError(PackSolveError):
    """Raised when a required package is missing from the candidate universe.

    Detected before any search begins. Not retryable without changing the
    set of available packages.
    """


class ResolverConstraintError(PackSolveError):
    """Raised when no combination of candidates satisfies every constraint.

    The message is the synthesized diagnostic naming the package closest
    to the requested targets that could not be satisfied.
    """


class CircularDependencyError(ResolverConstraintError):
    """Raised when the chosen install set contains a dependency cycle.

    Attributes:
        cycle: The closed cycle path as ``"id version"`` strings, first and
            last entries equal.
    """

    def __init__(self, message: str, cycle: list[str] | None = None) -> None:
        super().__init__(message)
        self.cycle = list(cycle or [])


class ResolutionCancelled(PackSolveError):
    """Raised when a resolve call observes its cancel signal.

    Carries no diagnostic message: nothing was decided and nothing
    external was changed.
    """
