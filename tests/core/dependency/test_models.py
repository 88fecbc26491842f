"""Tests for resolver data records: identities, candidates, packages, context."""

from __future__ import annotations

import pytest

from packsolve.core.dependency import (
    DependencyBehavior,
    InstalledPin,
    PackageCandidate,
    PackageDependency,
    PackageId,
    ResolverContext,
    ResolverPackage,
)
from packsolve.core.versioning import Version, VersionRange
from packsolve.exceptions import VersionParseError


# ===========================================================================
# PackageId
# ===========================================================================


class TestPackageId:
    """Tests for case-insensitive identities."""

    def test_equality_ignores_case(self) -> None:
        assert PackageId("Newtonsoft.Json") == PackageId("newtonsoft.json")

    def test_hash_ignores_case(self) -> None:
        assert len({PackageId("A"), PackageId("a")}) == 1

    def test_ordering_uses_folded_key(self) -> None:
        ids = [PackageId("b"), PackageId("A"), PackageId("c")]
        assert [str(i) for i in sorted(ids)] == ["A", "b", "c"]

    def test_display_keeps_spelling(self) -> None:
        assert str(PackageId("  MyLib ")) == "MyLib"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, name: str) -> None:
        with pytest.raises(ValueError):
            PackageId(name)

    def test_of_is_idempotent(self) -> None:
        package_id = PackageId("a")
        assert PackageId.of(package_id) is package_id
        assert PackageId.of("a") == package_id

    def test_not_equal_to_plain_string(self) -> None:
        assert PackageId("a") != "a"


# ===========================================================================
# Dependencies and candidates
# ===========================================================================


class TestPackageDependency:
    """Tests for dependency declarations."""

    def test_string_inputs_are_coerced(self) -> None:
        dep = PackageDependency("B", "[1.0, 2.0)")
        assert dep.id == PackageId("b")
        assert dep.version_range == VersionRange.parse("[1.0, 2.0)")

    def test_no_range_accepts_anything(self) -> None:
        assert PackageDependency("b").accepts(Version.parse("0.0.1"))

    def test_range_is_checked(self) -> None:
        dep = PackageDependency("b", "[1.0]")
        assert dep.accepts(Version.parse("1.0.0"))
        assert not dep.accepts(Version.parse("1.0.1"))

    def test_bad_range_raises(self) -> None:
        with pytest.raises(VersionParseError):
            PackageDependency("b", "[oops")


class TestPackageCandidate:
    """Tests for caller-supplied candidates."""

    def test_coercion(self) -> None:
        candidate = PackageCandidate("a", "1.0", [PackageDependency("b")])
        assert candidate.version == Version.parse("1.0.0")
        assert isinstance(candidate.dependencies, tuple)
        assert candidate.listed is True

    def test_str(self) -> None:
        assert str(PackageCandidate("a", "1.0")) == "a 1.0.0"


class TestResolverPackage:
    """Tests for solver-side packages and absent placeholders."""

    def test_absent_placeholder(self) -> None:
        absent = ResolverPackage.absent_for("a")
        assert absent.absent
        assert absent.version is None
        assert str(absent) == "a (absent)"

    def test_absent_cannot_have_version(self) -> None:
        with pytest.raises(ValueError):
            ResolverPackage("a", "1.0.0", absent=True)

    def test_absent_cannot_have_dependencies(self) -> None:
        with pytest.raises(ValueError):
            ResolverPackage("a", dependencies=[PackageDependency("b")], absent=True)

    def test_versionless_package_must_be_absent(self) -> None:
        with pytest.raises(ValueError):
            ResolverPackage("a")

    def test_from_candidate_keeps_dependencies(self) -> None:
        candidate = PackageCandidate("a", "1.0", [PackageDependency("b")], listed=False)
        package = ResolverPackage.from_candidate(candidate)
        assert package.dependencies == candidate.dependencies
        assert package.listed is False
        assert not package.absent

    def test_from_candidate_can_drop_dependencies(self) -> None:
        candidate = PackageCandidate("a", "1.0", [PackageDependency("b")])
        package = ResolverPackage.from_candidate(candidate, ignore_dependencies=True)
        assert package.dependencies == ()

    def test_find_dependency_is_case_insensitive(self) -> None:
        package = ResolverPackage("a", "1.0", [PackageDependency("B", "1.0")])
        assert package.find_dependency(PackageId("b")) is not None
        assert package.find_dependency(PackageId("c")) is None


# ===========================================================================
# Policy and context
# ===========================================================================


class TestDependencyBehavior:
    """Tests for policy name parsing."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("lowest", DependencyBehavior.LOWEST),
            ("Highest", DependencyBehavior.HIGHEST),
            ("HighestMinor", DependencyBehavior.HIGHEST_MINOR),
            ("highest_patch", DependencyBehavior.HIGHEST_PATCH),
            ("highest-minor", DependencyBehavior.HIGHEST_MINOR),
            ("IGNORE", DependencyBehavior.IGNORE),
        ],
    )
    def test_parse(self, text: str, expected: DependencyBehavior) -> None:
        assert DependencyBehavior.parse(text) is expected

    def test_unknown_policy(self) -> None:
        with pytest.raises(ValueError, match="Unknown dependency behavior"):
            DependencyBehavior.parse("newest")


class TestResolverContext:
    """Tests for context coercion and defaults."""

    def test_ids_are_coerced(self) -> None:
        ctx = ResolverContext(required_ids=["A"], target_ids=["b"])
        assert ctx.required_ids == frozenset({PackageId("a")})
        assert ctx.target_ids == frozenset({PackageId("B")})

    def test_targets_fall_back_to_required(self) -> None:
        ctx = ResolverContext(required_ids=["a"])
        assert ctx.targets == frozenset({PackageId("a")})

    def test_explicit_targets_win(self) -> None:
        ctx = ResolverContext(required_ids=["a"], target_ids=["b"])
        assert ctx.targets == frozenset({PackageId("b")})

    def test_preferred_versions_are_coerced(self) -> None:
        ctx = ResolverContext(preferred_versions={"A": "2.0"})
        assert ctx.preferred_versions == {PackageId("a"): Version.parse("2.0.0")}

    def test_defaults(self) -> None:
        ctx = ResolverContext()
        assert ctx.behavior is DependencyBehavior.LOWEST
        assert ctx.available == ()
        assert ctx.installed == ()

    def test_installed_pin_coercion(self) -> None:
        pin = InstalledPin("a", "[1.0]")
        assert pin.id == PackageId("a")
        assert pin.allowed_range.is_exact
