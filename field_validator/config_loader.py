"""Configuration loading: rule grammar and named rulesets."""

import logging
import os
import urllib.parse
from functools import lru_cache
from importlib.resources import files
from typing import Any, Dict, Optional

import jsonschema
import requests
import yaml

from .exceptions import ConfigurationError, RulesetLoadError
from .rule_parser import Grammar

logger = logging.getLogger(__name__)

FETCH_TIMEOUT_SECONDS = 10

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "grammar": {
            "type": "object",
            "properties": {
                "rule_separator": {"type": "string", "minLength": 1},
                "parameter_separator": {"type": "string", "minLength": 1},
                "parameter_list_separator": {"type": "string", "minLength": 1},
            },
            "additionalProperties": False,
        },
        "rulesets_uri": {"type": ["string", "null"]},
    },
}

RULESETS_SCHEMA = {
    "type": "object",
    "required": ["rulesets"],
    "properties": {
        "rulesets": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["rules"],
                "properties": {
                    "description": {"type": "string"},
                    "rules": {
                        "type": "object",
                        "additionalProperties": {"type": ["string", "array", "object"]},
                    },
                    "messages": {
                        "type": "object",
                        "additionalProperties": {"type": "string"},
                    },
                },
                "additionalProperties": False,
            },
        },
    },
}


class ConfigLoader:
    """
    Loads the validator configuration and the rulesets it points to.

    The configuration is the bundled ``local-config.yaml`` unless a path is
    given. Rulesets are loaded lazily, on first use, from ``rulesets_uri``.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_path: Path to a YAML config file; defaults to the bundled one

        Raises:
            ConfigurationError: If the config does not match its schema
            RulesetLoadError: If the config file cannot be read
        """
        if config_path is None:
            config_file = files("field_validator").joinpath("local-config.yaml")
            self.config_path = str(config_file)
        else:
            self.config_path = os.path.abspath(config_path)

        self.local_config = self._parse(self._read_file(self.config_path), self.config_path) or {}
        self._check_schema(self.local_config, CONFIG_SCHEMA, self.config_path)
        self._rulesets: Optional[Dict[str, Any]] = None

        logger.info("Validator config loaded", extra={"config_path": self.config_path})

    def get_local_config(self) -> Dict[str, Any]:
        return self.local_config

    def get_grammar(self) -> Grammar:
        """Rule declaration grammar, falling back to the defaults per separator."""
        return Grammar(**self.local_config.get("grammar", {}))

    def get_rulesets_uri(self) -> Optional[str]:
        """
        Resolve ``rulesets_uri`` from config.

        Relative paths are resolved against the directory of the config file.
        """
        uri = self.local_config.get("rulesets_uri")
        if not uri:
            return None

        parsed = urllib.parse.urlparse(uri)
        if not parsed.scheme:
            config_dir = os.path.dirname(self.config_path)
            return os.path.normpath(os.path.join(config_dir, uri))
        return uri

    def get_rulesets(self) -> Dict[str, Any]:
        """
        All named rulesets, keyed by name.

        Returns an empty dict when no ``rulesets_uri`` is configured.
        """
        if self._rulesets is None:
            uri = self.get_rulesets_uri()
            if uri is None:
                self._rulesets = {}
            else:
                document = self.load_rulesets_document(uri)
                self._rulesets = document["rulesets"]
                logger.info(
                    "Rulesets loaded",
                    extra={"rulesets_uri": uri, "rulesets": sorted(self._rulesets)},
                )
        return self._rulesets

    def get_ruleset(self, name: str) -> Dict[str, Any]:
        """
        One ruleset as ``{"description", "rules", "messages"}``.

        Raises:
            ConfigurationError: If no ruleset is named name
        """
        rulesets = self.get_rulesets()
        if name not in rulesets:
            raise ConfigurationError(
                f"Unknown ruleset: '{name}'. Available: {', '.join(sorted(rulesets)) or 'none'}"
            )
        ruleset = rulesets[name]
        return {
            "description": ruleset.get("description", ""),
            "rules": ruleset["rules"],
            "messages": ruleset.get("messages", {}),
        }

    def load_rulesets_document(self, uri: str) -> Dict[str, Any]:
        """
        Load and schema-check a rulesets document.

        Supports:
        - Plain paths
        - file:// - Local filesystem
        - https:// / http:// - Remote, fetched with requests

        Raises:
            ConfigurationError: If the document is not valid YAML or fails the schema
            RulesetLoadError: If the document cannot be read
        """
        parsed = urllib.parse.urlparse(uri)

        if not parsed.scheme:
            content = self._read_file(uri)
        elif parsed.scheme == "file":
            content = self._read_file(urllib.parse.unquote(parsed.path))
        elif parsed.scheme in ("http", "https"):
            content = self._fetch_uri(uri)
        else:
            raise ConfigurationError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

        document = self._parse(content, uri)
        self._check_schema(document, RULESETS_SCHEMA, uri)
        return document

    def _read_file(self, path: str) -> str:
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise RulesetLoadError(f"Failed to read {path}: {e}") from e

    def _fetch_uri(self, uri: str) -> str:
        """Fetch content from HTTP/HTTPS URI."""
        try:
            response = requests.get(uri, timeout=FETCH_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RulesetLoadError(f"Failed to fetch {uri}: {e}") from e
        return response.text

    def _parse(self, content: str, source: str) -> Any:
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {source}: {e}") from e

    def _check_schema(self, document: Any, schema: Dict[str, Any], source: str) -> None:
        try:
            jsonschema.validate(instance=document, schema=schema)
        except jsonschema.ValidationError as e:
            error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
            raise ConfigurationError(
                f"Invalid configuration in {source} at {error_path}: {e.message}"
            ) from e


@lru_cache(maxsize=1)
def get_default_config() -> ConfigLoader:
    """The bundled configuration, loaded once per process."""
    return ConfigLoader()
