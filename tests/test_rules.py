"""
Tests for the built-in rules

Each case validates a single field and checks pass or fail.
"""
import pytest
from field_validator import ConfigurationError, Validator


def passes(value, rule, **extra):
    data = {"field": value, **extra}
    return Validator(data, {"field": rule}).passes()


class TestPresence:
    """Test required and accepted."""

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_required_fails_on_empty(self, value):
        assert not passes(value, "required")

    @pytest.mark.parametrize("value", ["x", 0, False, [1], {"a": 1}])
    def test_required_passes_on_present(self, value):
        assert passes(value, "required")

    def test_required_missing_key(self):
        """Test that an absent field fails required."""
        assert not Validator({}, {"field": "required"}).passes()

    @pytest.mark.parametrize("value,expected", [
        ("yes", True), ("on", True), (True, True), ("no", False), (False, False),
    ])
    def test_accepted(self, value, expected):
        assert passes(value, "accepted") is expected


class TestOptionalFields:
    """Test that absent values pass every rule but required."""

    @pytest.mark.parametrize("rule", [
        "string", "numeric", "integer", "boolean", "array", "min:3", "max:3",
        "between:1,2", "size:2", "email", "url", "alpha", "alpha_num",
        "regex:^a$", "in:a,b", "not_in:a,b",
    ])
    def test_absent_value_passes(self, rule):
        assert Validator({}, {"field": rule}).passes()


class TestTypes:
    """Test type rules."""

    @pytest.mark.parametrize("value,rule,expected", [
        ("abc", "string", True),
        (1, "string", False),
        (3.5, "numeric", True),
        ("3.5", "numeric", True),
        ("abc", "numeric", False),
        (7, "integer", True),
        ("-7", "integer", True),
        ("7.5", "integer", False),
        (True, "integer", False),
        (True, "boolean", True),
        ("1", "boolean", True),
        ("yes", "boolean", False),
        ([1, 2], "array", True),
        ("1,2", "array", False),
    ])
    def test_type_rules(self, value, rule, expected):
        assert passes(value, rule) is expected


class TestSize:
    """Test size rules on numbers, strings and lists."""

    @pytest.mark.parametrize("value,rule,expected", [
        (5, "min:3", True),
        (2, "min:3", False),
        ("abc", "min:3", True),
        ("ab", "min:3", False),
        ("", "min:3", False),
        ([1, 2, 3, 4], "max:3", False),
        (3, "max:3", True),
        (5, "between:1,10", True),
        ("toolongvalue", "between:1,10", False),
        ("ab", "size:2", True),
        ([1], "size:2", False),
        (object(), "min:1", False),
    ])
    def test_size_rules(self, value, rule, expected):
        assert passes(value, rule) is expected


class TestFormat:
    """Test format rules."""

    @pytest.mark.parametrize("value,rule,expected", [
        ("ada@example.com", "email", True),
        ("ada@example", "email", False),
        ("ada example.com", "email", False),
        ("https://example.com/path", "url", True),
        ("ftp://example.com", "url", False),
        ("Ada", "alpha", True),
        ("Ada1", "alpha", False),
        ("Ada1", "alpha_num", True),
        ("Ada-1", "alpha_num", False),
        ("AB-123", r"regex:^[A-Z]{2}-\d+$", True),
        ("ab-123", r"regex:^[A-Z]{2}-\d+$", False),
        ("aaa", "regex:^a{1,3}$", True),
    ])
    def test_format_rules(self, value, rule, expected):
        assert passes(value, rule) is expected

    def test_regex_alternation(self):
        """Test a pattern with the rule separator in the sequence and mapping shapes."""
        assert passes("b", ["required", "regex:^(a|b)$"])
        assert not passes("c", ["required", "regex:^(a|b)$"])
        assert passes("a", {"regex": "^(a|b)$"})

    def test_regex_alternation_in_string_rejected(self):
        """Test that an alternation in the string shape is a configuration error."""
        with pytest.raises(ConfigurationError):
            passes("a", "regex:^(a|b)$")


class TestMembership:
    """Test in and not_in."""

    def test_in(self):
        assert passes("red", "in:red,green")
        assert not passes("blue", "in:red,green")

    def test_in_compares_as_string(self):
        """Test that numeric values match their string parameter."""
        assert passes(2, "in:1,2,3")

    def test_not_in(self):
        assert passes("blue", "not_in:red,green")
        assert not passes("red", "not_in:red,green")


class TestCrossField:
    """Test rules reading other fields."""

    def test_confirmed(self):
        assert passes("pw", "confirmed", field_confirmation="pw")
        assert not passes("pw", "confirmed", field_confirmation="other")
        assert not passes("pw", "confirmed")

    def test_same(self):
        assert passes("x", "same:other", other="x")
        assert not passes("x", "same:other", other="y")

    def test_different(self):
        assert passes("x", "different:other", other="y")
        assert not passes("x", "different:other", other="x")

    def test_same_nested_path(self):
        """Test that cross-field parameters may be dotted paths."""
        data = {"field": "x", "account": {"login": "x"}}
        assert Validator(data, {"field": "same:account.login"}).passes()
