"""
Tests for ConfigLoader

Tests the bundled config, custom config files and ruleset loading.
"""
from unittest import mock

import pytest
import requests
from field_validator import ConfigLoader, ConfigurationError, RulesetLoadError, Validator
from field_validator.config_loader import get_default_config
from field_validator.rule_parser import Grammar


@pytest.fixture
def loader(config_file):
    """ConfigLoader reading the test config."""
    return ConfigLoader(str(config_file))


class TestBundledConfig:
    """Test the configuration shipped with the package."""

    def test_default_grammar(self):
        """Test that the bundled grammar uses |, : and ,."""
        assert ConfigLoader().get_grammar() == Grammar("|", ":", ",")

    def test_no_rulesets_by_default(self):
        """Test that the bundled config declares no rulesets."""
        loader = ConfigLoader()
        assert loader.get_rulesets_uri() is None
        assert loader.get_rulesets() == {}

    def test_default_config_is_cached(self):
        """Test that the bundled config is loaded once."""
        assert get_default_config() is get_default_config()


class TestCustomConfig:
    """Test loading a config file from disk."""

    def test_partial_grammar_keeps_defaults(self, loader):
        """Test that unspecified separators fall back to defaults."""
        assert loader.get_grammar() == Grammar("|", ":", ",")

    def test_custom_grammar_used_by_validator(self, tmp_path):
        """Test that the validator parses with the configured separators."""
        path = tmp_path / "config.yaml"
        path.write_text("grammar:\n  rule_separator: \";\"\n  parameter_separator: \"=\"\n")
        validator = Validator({"name": "Al"}, {"name": "required;min=3"},
                              config=ConfigLoader(str(path)))
        assert validator.validate().get_errors() == {"name": ["The name must be at least 3."]}

    def test_relative_rulesets_uri(self, loader, rulesets_file):
        """Test that relative ruleset paths resolve against the config file."""
        assert loader.get_rulesets_uri() == str(rulesets_file)

    def test_unknown_grammar_key_rejected(self, tmp_path):
        """Test that the config is checked against its schema."""
        path = tmp_path / "config.yaml"
        path.write_text("grammar:\n  separator: \"|\"\n")
        with pytest.raises(ConfigurationError, match="grammar"):
            ConfigLoader(str(path))

    def test_empty_separator_rejected(self, tmp_path):
        """Test that separators cannot be empty."""
        path = tmp_path / "config.yaml"
        path.write_text("grammar:\n  rule_separator: \"\"\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader(str(path))

    def test_missing_config_file(self, tmp_path):
        """Test that an unreadable config raises RulesetLoadError."""
        with pytest.raises(RulesetLoadError):
            ConfigLoader(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        """Test that broken YAML is a configuration error."""
        path = tmp_path / "config.yaml"
        path.write_text("grammar: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader(str(path))


class TestRulesets:
    """Test named rulesets."""

    def test_get_rulesets(self, loader):
        """Test that all rulesets are loaded by name."""
        assert sorted(loader.get_rulesets()) == ["address", "signup"]

    def test_get_ruleset(self, loader):
        """Test the normalized ruleset shape."""
        ruleset = loader.get_ruleset("signup")
        assert ruleset["description"] == "New account form"
        assert ruleset["rules"]["name"] == "required|min:3"
        assert ruleset["messages"] == {"name.required": "Please tell us your name."}

    def test_ruleset_defaults(self, loader):
        """Test that description and messages are optional."""
        ruleset = loader.get_ruleset("address")
        assert ruleset["description"] == ""
        assert ruleset["messages"] == {}

    def test_unknown_ruleset(self, loader):
        """Test that asking for a missing ruleset is a configuration error."""
        with pytest.raises(ConfigurationError, match="billing"):
            loader.get_ruleset("billing")

    def test_validator_from_ruleset(self, loader):
        """Test building a validator from a named ruleset."""
        validator = Validator.from_ruleset("signup", {"name": "", "email": "x@y.io"}, config=loader)
        assert validator.validate().get_errors() == {
            "name": ["Please tell us your name.", "The name must be at least 3."],
            "email": [],
        }

    def test_file_uri(self, loader, rulesets_file):
        """Test loading rulesets from a file:// URI."""
        document = loader.load_rulesets_document(rulesets_file.as_uri())
        assert "signup" in document["rulesets"]

    def test_document_schema_checked(self, loader, tmp_path):
        """Test that a ruleset without rules is rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("rulesets:\n  broken:\n    description: no rules\n")
        with pytest.raises(ConfigurationError, match="rules"):
            loader.load_rulesets_document(str(path))

    def test_unsupported_scheme(self, loader):
        """Test that unknown URI schemes are rejected."""
        with pytest.raises(ConfigurationError, match="ftp"):
            loader.load_rulesets_document("ftp://example.com/rulesets.yaml")

    def test_http_uri_fetched_with_requests(self, loader, rulesets_file):
        """Test that remote rulesets are fetched over HTTP."""
        response = mock.Mock(text=rulesets_file.read_text())
        with mock.patch("field_validator.config_loader.requests.get",
                        return_value=response) as get:
            document = loader.load_rulesets_document("https://example.com/rulesets.yaml")

        get.assert_called_once_with("https://example.com/rulesets.yaml", timeout=10)
        response.raise_for_status.assert_called_once()
        assert "address" in document["rulesets"]

    def test_http_failure(self, loader):
        """Test that network errors raise RulesetLoadError."""
        with mock.patch("field_validator.config_loader.requests.get",
                        side_effect=requests.ConnectionError("unreachable")):
            with pytest.raises(RulesetLoadError, match="unreachable"):
                loader.load_rulesets_document("https://example.com/rulesets.yaml")
