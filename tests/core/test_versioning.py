"""
Unit tests for version parsing and ordering.
"""

import pytest

from tooldepot.core.exceptions import ErrorKind, VersionParseError
from tooldepot.core.versioning import (
    Ordering,
    compare_versions,
    parse_version,
    select_max_version,
)


def cmp(a: str, b: str) -> Ordering:
    return compare_versions(parse_version(a), parse_version(b))


class TestParseVersion:
    """Tests for parse_version()."""

    def test_full_version(self):
        """Test four numeric segments and a prerelease tag."""
        v = parse_version("4.12.0.7-beta.2")
        assert v.core == (4, 12, 0, 7)
        assert v.prerelease == "beta.2"
        assert v.is_prerelease
        assert str(v) == "4.12.0.7-beta.2"

    def test_missing_segments_default_to_zero(self):
        """Test '1.2' parses as 1.2.0.0."""
        v = parse_version("1.2")
        assert v.core == (1, 2, 0, 0)
        assert v.prerelease is None
        assert not v.is_prerelease

    def test_prerelease_split_on_first_dash(self):
        """Test only the first dash separates the prerelease."""
        v = parse_version("5.0.0-1.25277.114-dev")
        assert v.core == (5, 0, 0, 0)
        assert v.prerelease == "1.25277.114-dev"

    @pytest.mark.parametrize(
        "value", ["", "1.2.3.4.5", "1.x", "1..2", "v1.0.0", "1.2.-3", "١.٢"]
    )
    def test_invalid_versions(self, value):
        """Test malformed cores are rejected."""
        with pytest.raises(VersionParseError) as exc_info:
            parse_version(value)

        assert exc_info.value.kind is ErrorKind.VERSION_PARSE_FAILURE
        assert exc_info.value.version == value


class TestCompareVersions:
    """Tests for compare_versions() and the ParsedVersion operators."""

    def test_numeric_segments(self):
        """Test segments compare numerically, not lexically."""
        assert cmp("1.10.0", "1.9.0") is Ordering.GREATER
        assert cmp("2.0", "10.0") is Ordering.LESS

    def test_missing_segments_equal_zero(self):
        """Test 1.2 == 1.2.0.0."""
        assert cmp("1.2", "1.2.0.0") is Ordering.EQUAL
        assert parse_version("1.2") == parse_version("1.2.0.0")
        assert hash(parse_version("1.2")) == hash(parse_version("1.2.0.0"))

    def test_equal_prerelease_tokens_hash_equal(self):
        """Test numerically and case-insensitively equal tags share a hash."""
        a = parse_version("1.0.0-alpha.01")
        b = parse_version("1.0.0-alpha.1")
        c = parse_version("1.0.0-ALPHA.1")

        assert a == b == c
        assert hash(a) == hash(b) == hash(c)
        assert len({a, b, c}) == 1

    def test_release_above_prerelease(self):
        """Test a release sorts above its prereleases."""
        assert cmp("1.0.0", "1.0.0-rc.1") is Ordering.GREATER
        assert cmp("1.0.0-rc.1", "1.0.0") is Ordering.LESS

    def test_core_wins_over_prerelease(self):
        """Test a higher core beats a release of a lower core."""
        assert cmp("1.0.1-alpha", "1.0.0") is Ordering.GREATER

    def test_numeric_token_below_alphanumeric(self):
        """Test numeric prerelease tokens sort below alphanumeric ones."""
        assert cmp("1.0.0-1", "1.0.0-alpha") is Ordering.LESS
        assert cmp("1.0.0-beta", "1.0.0-2") is Ordering.GREATER

    def test_numeric_tokens_compare_numerically(self):
        """Test 'alpha.10' is above 'alpha.9'."""
        assert cmp("1.0.0-alpha.10", "1.0.0-alpha.9") is Ordering.GREATER

    def test_alphanumeric_case_insensitive(self):
        """Test alphanumeric tokens ignore case."""
        assert cmp("1.0.0-ALPHA", "1.0.0-alpha") is Ordering.EQUAL
        assert cmp("1.0.0-Alpha", "1.0.0-beta") is Ordering.LESS

    def test_prefix_sorts_first(self):
        """Test a strict prefix of tokens sorts first."""
        assert cmp("1.0.0-alpha", "1.0.0-alpha.1") is Ordering.LESS
        assert cmp("1.0.0-alpha.1.2", "1.0.0-alpha.1") is Ordering.GREATER

    def test_sorting(self):
        """Test total ordering via sorted()."""
        values = [
            "1.0.0",
            "1.0.0-beta",
            "1.0.0-alpha.1",
            "0.9",
            "1.0.0-alpha",
            "1.0.0-alpha.beta",
            "1.0.0-1",
        ]

        result = [str(v) for v in sorted(parse_version(v) for v in values)]

        assert result == [
            "0.9",
            "1.0.0-1",
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0",
        ]

    def test_antisymmetric(self):
        """Test compare(a, b) mirrors compare(b, a)."""
        pairs = [("1.0", "1.0.1"), ("2.0.0-rc.1", "2.0.0"), ("1.0.0-a", "1.0.0-1")]
        for a, b in pairs:
            assert cmp(a, b).value == -cmp(b, a).value


class TestSelectMaxVersion:
    """Tests for select_max_version()."""

    def test_prerelease_max(self):
        """Test the highest prerelease wins when no release exists."""
        result = select_max_version(
            ["1.0.0", "1.0.0-beta", "1.0.1", "2.0.0-alpha.1", "2.0.0-alpha.2"]
        )
        assert result == "2.0.0-alpha.2"

    def test_release_beats_prereleases(self):
        """Test a release of the same core wins."""
        result = select_max_version(["2.0.0-rc.1", "2.0.0", "2.0.0-rc.2"])
        assert result == "2.0.0"

    def test_returns_raw_string(self):
        """Test the original string is returned unchanged."""
        assert select_max_version(["1.2", "1.1.9"]) == "1.2"

    def test_last_of_equal_versions_wins(self):
        """Test ties return the last equal entry."""
        assert select_max_version(["1.0", "1.0.0"]) == "1.0.0"
        assert select_max_version(["1.0.0", "1.0"]) == "1.0"
        assert select_max_version(["2.0.0-RC.1", "0.9", "2.0.0-rc.1"]) == "2.0.0-rc.1"

    def test_skips_unparsable(self):
        """Test garbage entries are ignored."""
        result = select_max_version(["latest", "1.0.0", "1.0.0.0.1", "0.9"])
        assert result == "1.0.0"

    def test_accepts_iterator(self):
        """Test any iterable works."""
        result = select_max_version(v for v in ["3.0", "3.1"])
        assert result == "3.1"

    def test_none_parse(self):
        """Test all-invalid input raises."""
        with pytest.raises(VersionParseError, match="No parseable versions"):
            select_max_version(["nightly", "latest"])

    def test_empty(self):
        """Test empty input raises."""
        with pytest.raises(VersionParseError, match="0 candidate"):
            select_max_version([])
