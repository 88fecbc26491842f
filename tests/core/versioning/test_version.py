"""Tests for version parsing, normalization and precedence."""

from __future__ import annotations

import pytest

from packsolve.core.versioning import Version
from packsolve.exceptions import PackSolveError, VersionParseError


class TestParse:
    """Tests for ``Version.parse``."""

    def test_three_part_version(self) -> None:
        v = Version.parse("1.2.3")
        assert (v.major, v.minor, v.patch, v.revision) == (1, 2, 3, 0)
        assert v.release_labels == ()

    def test_missing_parts_default_to_zero(self) -> None:
        assert Version.parse("2") == Version.parse("2.0.0.0")
        assert Version.parse("1.5") == Version(1, 5, 0, 0)

    def test_four_part_version(self) -> None:
        assert Version.parse("1.0.0.7").revision == 7

    def test_prerelease_labels(self) -> None:
        v = Version.parse("1.0.0-beta.2")
        assert v.release_labels == ("beta", "2")
        assert v.is_prerelease
        assert v.release == "beta.2"

    def test_metadata_is_kept_but_ignored_for_equality(self) -> None:
        v = Version.parse("1.0.0+sha.abc")
        assert v.metadata == "sha.abc"
        assert v == Version.parse("1.0.0")
        assert hash(v) == hash(Version.parse("1.0.0"))

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert Version.parse("  1.0.0 ") == Version(1, 0, 0)

    @pytest.mark.parametrize(
        "text",
        ["", "abc", "1.2.3.4.5", "1..0", "1.0.0-", "1.0.0-beta..1", "v1.0", "1.0.0+"],
    )
    def test_invalid_versions_raise(self, text: str) -> None:
        with pytest.raises(VersionParseError):
            Version.parse(text)

    def test_parse_error_is_a_packsolve_error_and_value_error(self) -> None:
        with pytest.raises(PackSolveError):
            Version.parse("nope")
        with pytest.raises(ValueError):
            Version.parse("nope")


class TestOrdering:
    """Tests for SemVer-style precedence."""

    def test_numeric_parts_compare_numerically(self) -> None:
        assert Version.parse("1.10.0") > Version.parse("1.9.0")

    def test_revision_breaks_ties(self) -> None:
        assert Version.parse("1.0.0.1") > Version.parse("1.0.0")

    def test_prerelease_sorts_before_release(self) -> None:
        assert Version.parse("1.0.0-rc.1") < Version.parse("1.0.0")

    def test_semver_prerelease_chain(self) -> None:
        chain = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
        ]
        versions = [Version.parse(v) for v in chain]
        assert sorted(reversed(versions)) == versions

    def test_labels_compare_case_insensitively(self) -> None:
        assert Version.parse("1.0.0-BETA") == Version.parse("1.0.0-beta")


class TestNormalization:
    """Tests for ``to_normalized`` and ``str``."""

    def test_short_version_is_padded(self) -> None:
        assert str(Version.parse("1")) == "1.0.0"

    def test_zero_revision_is_dropped(self) -> None:
        assert str(Version.parse("1.2.3.0")) == "1.2.3"

    def test_nonzero_revision_is_kept(self) -> None:
        assert str(Version.parse("1.2.3.4")) == "1.2.3.4"

    def test_labels_kept_metadata_dropped(self) -> None:
        assert str(Version.parse("2.0-rc.1+build.5")) == "2.0.0-rc.1"

    def test_repr(self) -> None:
        assert repr(Version.parse("1.0")) == "Version('1.0.0')"
