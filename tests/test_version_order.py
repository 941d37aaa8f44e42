"""Tests for version parsing and ordering."""

import pytest

from versioning.errors import InvalidVersionSpec, VersionParseError
from versioning.version import VersionOrder, normalized_version


class TestVersionParsing:
    """Tests for splitting version text into components."""

    def test_release_components_with_default_epoch(self):
        """Epoch defaults to zero and leads the release components."""
        v = VersionOrder("1.7.0")
        assert v.version == [[0], [1], [7], [0]]
        assert v.local == []
        assert v.epoch == 0

    def test_alphanumeric_runs(self):
        """Components split into alternating numeric and alphabetic runs."""
        assert VersionOrder("2013a").version == [[0], [2013, "a"]]
        assert VersionOrder("1.0a1").version == [[0], [1], [0, "a", 1]]

    def test_component_starting_with_letter_gets_zero(self):
        """A component starting with a letter is prefixed with zero."""
        assert VersionOrder("1.rc2").version == [[0], [1], [0, "rc", 2]]

    def test_local_identifier(self):
        """Text after '+' forms the local identifier."""
        v = VersionOrder("1.2.3+4.5.6")
        assert v.version == [[0], [1], [2], [3]]
        assert v.local == [[4], [5], [6]]

    def test_epoch(self):
        """A leading 'N!' sets the epoch."""
        v = VersionOrder("2!1.0")
        assert v.epoch == 2
        assert v.release == [[1], [0]]

    def test_case_and_whitespace_normalized(self):
        """Versions are stripped and lower-cased."""
        v = VersionOrder("  1.0RC1 ")
        assert str(v) == "1.0rc1"
        assert v == VersionOrder("1.0rc1")

    def test_dashes_and_underscores_separate(self):
        """Dashes (without underscores) and underscores split components."""
        assert VersionOrder("1-2-3") == VersionOrder("1.2.3")
        assert VersionOrder("1_2_3") == VersionOrder("1.2.3")

    def test_special_strings(self):
        """'post' maps to infinity and 'dev' to the uppercase marker."""
        assert VersionOrder("1.0post1").version[-1] == [0, float("inf"), 1]
        assert VersionOrder("1.0dev1").version[-1] == [0, "DEV", 1]

    def test_repr(self):
        """repr shows the normalized text."""
        assert repr(VersionOrder("1.2")) == 'VersionOrder("1.2")'

    def test_normalized_version_helper(self):
        """normalized_version is a thin constructor."""
        assert normalized_version("1.7") == VersionOrder("1.7.0")

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "1.2$", "1..2", "1.2.", "1!2!3", "a!1.0", "1+2+3", "1.0+", "1.2 3", "1-2_3"],
    )
    def test_invalid_versions(self, text):
        """Malformed version text is rejected with VersionParseError."""
        with pytest.raises(VersionParseError):
            VersionOrder(text)

    def test_parse_error_is_value_error(self):
        """The error hierarchy stays compatible with ValueError handlers."""
        with pytest.raises(ValueError) as excinfo:
            VersionOrder("")
        assert isinstance(excinfo.value, InvalidVersionSpec)
        assert excinfo.value.reason == "empty version string"


class TestVersionOrdering:
    """Tests for comparison semantics."""

    @pytest.mark.parametrize(
        "lower,higher",
        [
            ("0.4", "0.4.1"),
            ("0.4.1.rc", "0.4.1"),
            ("0.5a1", "0.5b3"),
            ("0.5b3", "0.5c1"),
            ("0.5c1", "0.5"),
            ("1.0dev", "1.0a"),
            ("1.0a", "1.0"),
            ("1.0", "1.0post1"),
            ("1.0.9", "1.0post1"),
            ("1.1dev1", "1.1a1"),
            ("1.1a1", "1.1.0rc1"),
            ("1.1.0rc1", "1.1.0"),
            ("1.1.0", "1.1.0post1"),
            ("1.1.0post1", "1.1post2"),
            ("2013a", "2013b"),
            ("2013b", "2013k"),
            ("1.0.0a", "1.0.0"),
            ("1.0", "1.0+1"),
            ("1.0+1", "1.0+2"),
            ("9999", "1!0.1"),
            ("1!1.0", "2!0.1"),
        ],
    )
    def test_strict_ordering(self, lower, higher):
        """Each pair sorts lower < higher."""
        assert VersionOrder(lower) < VersionOrder(higher)
        assert VersionOrder(higher) > VersionOrder(lower)
        assert VersionOrder(lower) != VersionOrder(higher)

    def test_trailing_zero_equivalence(self):
        """Missing trailing segments count as zero."""
        assert VersionOrder("1.7") == VersionOrder("1.7.0")
        assert VersionOrder("1.7") == VersionOrder("1.7.0.0")
        assert VersionOrder("0!1.7") == VersionOrder("1.7")
        assert VersionOrder("1.7") <= VersionOrder("1.7.0")
        assert VersionOrder("1.7") >= VersionOrder("1.7.0")

    def test_equal_versions_hash_equal(self):
        """Versions equal under padding share a hash."""
        assert hash(VersionOrder("1.7")) == hash(VersionOrder("1.7.0.0"))
        assert len({VersionOrder("1.7"), VersionOrder("1.7.0"), VersionOrder("1.8")}) == 2

    def test_compare_returns_sign(self):
        """compare returns -1, 0 or 1."""
        assert VersionOrder("1.6").compare(VersionOrder("1.7")) == -1
        assert VersionOrder("1.7").compare(VersionOrder("1.7.0")) == 0
        assert VersionOrder("1.8").compare(VersionOrder("1.7")) == 1

    def test_sorting(self):
        """Lists of versions sort by version order."""
        versions = ["1.1", "1.0", "1.0a", "1!0.1", "1.0post1", "1.0dev"]
        ordered = [str(v) for v in sorted(VersionOrder(x) for x in versions)]
        assert ordered == ["1.0dev", "1.0a", "1.0", "1.0post1", "1.1", "1!0.1"]

    def test_comparison_with_other_types(self):
        """Comparing to a non-version is not supported."""
        assert (VersionOrder("1.0") == "1.0") is False
        with pytest.raises(TypeError):
            VersionOrder("1.0") < "1.1"  # pylint: disable=expression-not-assigned


class TestStartsWith:
    """Tests for prefix semantics used by wildcards and '='."""

    @pytest.mark.parametrize(
        "version,prefix,expected",
        [
            ("1.0", "1.0", True),
            ("1.0.0", "1.0", True),
            ("1.0", "1.0.0", True),
            ("1.0.1", "1.0.0", False),
            ("1.3.4", "1.2.4", False),
            ("2013a", "2013a", True),
            ("2013a", "2013b", False),
            ("2013ab", "2013a", True),
            ("1.2.3+4.5.6", "1.2.3", True),
            ("1.2.3+4.5.6", "1.2.3+4", True),
            ("1.2.3+4.5.6", "1.2.3+5", False),
            ("1.2.3+4.5.6", "1.2.4+5", False),
            ("3.3.1", "3.3", True),
            ("3.4", "3.3", False),
            ("3.30", "3.3", False),
        ],
    )
    def test_startswith(self, version, prefix, expected):
        """Prefix tests compare segment by segment."""
        assert VersionOrder(version).startswith(VersionOrder(prefix)) is expected
