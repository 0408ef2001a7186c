"""Configuration loading from bundled, local or remote YAML."""

import logging
import time
import urllib.parse
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import requests
import yaml

from .introspection import (
    DEFAULT_NAME_TAG,
    DEFAULT_OMIT_PLACEHOLDER,
    DEFAULT_RULE_TAG,
    RecordSchema,
)

logger = logging.getLogger(__name__)

BUNDLED_CONFIG = "purify-config.yaml"

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "rule_tag": {"type": "string", "minLength": 1},
        "name_tag": {"type": "string", "minLength": 1},
        "omit_placeholder": {"type": "string"},
        "register_builtins": {"type": "boolean"},
        "schemas": {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "minLength": 1},
                        "rules": {"type": "string"},
                        "alias": {"type": ["string", "null"]},
                    },
                    "required": ["name"],
                    "additionalProperties": False,
                },
            },
        },
    },
    "additionalProperties": False,
}


class ConfigLoader:
    """Loads and checks purify configuration."""

    DEFAULT_FETCH_TIMEOUT = 10

    def __init__(self, config_uri: Optional[str] = None):
        """
        Load configuration.

        Args:
            config_uri: Where to read the YAML from. None uses the bundled
                purify-config.yaml. Otherwise a filesystem path (relative to
                the working directory), a file:// URI or an http(s):// URI.

        Raises:
            ValueError: If the document is not valid configuration
            RuntimeError: If a remote document cannot be fetched
        """
        self.config_uri = config_uri
        self.config = self._load(config_uri)
        self.config_loaded_at = time.time()

    def _load(self, config_uri: Optional[str]) -> Dict[str, Any]:
        if config_uri is None:
            config_file = files("purify").joinpath(BUNDLED_CONFIG)
            logger.debug("Loading bundled config", extra={"config_uri": str(config_file)})
            with config_file.open("r") as f:
                config = yaml.safe_load(f)
        else:
            config = self._load_config_from_uri(config_uri)

        return self._check(config or {}, config_uri or BUNDLED_CONFIG)

    def _load_config_from_uri(self, uri: str) -> Any:
        """
        Load YAML from a path or URI.

        Supports:
        - Plain paths - ./purify.yaml, /etc/purify.yaml
        - file:// - Local filesystem (absolute paths)
        - https:// / http:// - Remote, fetched with requests
        """
        parsed = urllib.parse.urlparse(uri)

        if not parsed.scheme:
            return self._load_yaml(Path(uri))

        if parsed.scheme == "file":
            return self._load_yaml(Path(urllib.parse.unquote(parsed.path)))

        if parsed.scheme in ("http", "https"):
            return self._parse_yaml(self._fetch_uri(uri), uri)

        raise ValueError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

    def _load_yaml(self, path: Path) -> Any:
        """Load YAML file from disk."""
        logger.debug("Loading config file", extra={"config_path": str(path)})
        try:
            text = path.read_text()
        except OSError as e:
            raise ValueError(f"Cannot read config file {path}: {e}") from e
        return self._parse_yaml(text, str(path))

    def _parse_yaml(self, text: str, source: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {source}: {e}") from e

    def _fetch_uri(self, uri: str) -> str:
        """Fetch content from HTTP/HTTPS URI."""
        logger.debug("Fetching remote config", extra={"config_uri": uri})
        try:
            response = requests.get(uri, timeout=self.DEFAULT_FETCH_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RuntimeError(f"Failed to fetch config from {uri}: {e}") from e
        return response.text

    def _check(self, config: Any, source: str) -> Dict[str, Any]:
        """Validate the loaded document against CONFIG_SCHEMA."""
        try:
            jsonschema.validate(config, CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise ValueError(f"Invalid config in {source} at {location}: {e.message}") from e
        return config

    def get_config(self) -> Dict[str, Any]:
        """Get the full configuration dict."""
        return self.config

    def get_rule_tag(self) -> str:
        return self.config.get("rule_tag", DEFAULT_RULE_TAG)

    def get_name_tag(self) -> str:
        return self.config.get("name_tag", DEFAULT_NAME_TAG)

    def get_omit_placeholder(self) -> str:
        return self.config.get("omit_placeholder", DEFAULT_OMIT_PLACEHOLDER)

    def get_register_builtins(self) -> bool:
        return self.config.get("register_builtins", True)

    def get_schemas(self) -> Dict[str, RecordSchema]:
        """
        Get the named record schemas.

        Returns:
            Dict mapping schema name to RecordSchema, in configuration order
        """
        return {
            name: RecordSchema.from_config(name, entries)
            for name, entries in (self.config.get("schemas") or {}).items()
        }

    def get_config_age(self) -> Optional[float]:
        """
        Get age of the configuration in seconds since it was loaded.

        Returns:
            Age in seconds, or None if not loaded
        """
        if hasattr(self, "config_loaded_at"):
            return time.time() - self.config_loaded_at
        return None
