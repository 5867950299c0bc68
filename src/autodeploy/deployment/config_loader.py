#!/usr/bin/env python3
"""
Configuration loader with multi-layer merging for deployments.

Layers (low to high priority):
1. Built-in defaults
2. User file (--config-file, YAML or JSON)
3. Environment (INPUT_<NAME> as set by GitHub Actions, then AUTODEPLOY_<NAME>)
4. User CLI flags

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from autodeploy.core.config import (
    DEFAULT_HEALTH_CHECK_TIMEOUT,
    ConfigValidator,
    DeploymentRequest,
    parse_bool,
    resolve_platform,
)
from autodeploy.core.errors import ConfigurationError, create_error_context


logger = logging.getLogger(__name__)

# Input names as exposed to CI -> DeploymentRequest field names
INPUT_ALIASES = {
    "deployment_type": "platform",
    "github_token": "auth_token",
}

DEFAULTS: Dict[str, Any] = {
    "health_check_timeout": DEFAULT_HEALTH_CHECK_TIMEOUT,
    "rollback_on_failure": False,
}


class ConfigLoader:
    """Layered configuration loader producing a validated DeploymentRequest."""

    ENV_PREFIXES = ("INPUT_", "AUTODEPLOY_")

    @classmethod
    def deep_merge(cls, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries. Override wins conflicts.
        Nested dicts are merged, lists/primitives are replaced.
        None and empty-string overrides are ignored so that unset inputs
        never mask a lower layer.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = deepcopy(base)

        for key, value in override.items():
            if value is None or value == "":
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = cls.deep_merge(result[key], value)
            else:
                result[key] = deepcopy(value)

        return result

    @classmethod
    def normalize_keys(cls, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Lowercase keys, convert hyphens and map CI input names to fields."""
        normalized = {}
        for key, value in values.items():
            name = key.strip().lower().replace("-", "_")
            normalized[INPUT_ALIASES.get(name, name)] = value
        return normalized

    @classmethod
    def load_file(cls, config_file: str) -> Dict[str, Any]:
        """
        Load a YAML or JSON configuration file.

        Raises:
            ConfigurationError: If the file is missing or not a mapping
        """
        path = Path(config_file)
        context = create_error_context("load_config", file_path=str(path))
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_file}", context=context)

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid config file {config_file}: {e}", context=context, cause=e
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_file} must contain a mapping", context=context
            )
        return cls.normalize_keys(data)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Collect known inputs from the process environment."""
        environ = os.environ if environ is None else environ
        known = set(DeploymentRequest.field_names()) | set(INPUT_ALIASES)

        values: Dict[str, Any] = {}
        for prefix in cls.ENV_PREFIXES:
            layer = {}
            for key, value in environ.items():
                if not key.startswith(prefix):
                    continue
                name = key[len(prefix):].lower().replace("-", "_")
                if name in known:
                    layer[name] = value
            values = cls.deep_merge(values, cls.normalize_keys(layer))
        return values

    @classmethod
    def load(
        cls,
        cli_values: Optional[Dict[str, Any]] = None,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Merge every configuration layer into one flat mapping.

        Args:
            cli_values: Values passed on the command line
            config_file: Optional YAML/JSON file
            environ: Environment to read (defaults to os.environ)

        Returns:
            Merged configuration values (not yet validated)
        """
        config = deepcopy(DEFAULTS)
        if config_file:
            config = cls.deep_merge(config, cls.load_file(config_file))
        config = cls.deep_merge(config, cls.from_environment(environ))
        config = cls.deep_merge(config, cls.normalize_keys(cli_values or {}))
        return config

    @classmethod
    def build_request(cls, values: Dict[str, Any]) -> DeploymentRequest:
        """
        Validate merged values and build the immutable request.

        Raises:
            ConfigurationError: Listing every validation error found
        """
        errors = ConfigValidator().validate(values)
        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {', '.join(errors)}",
                context=create_error_context(
                    "validate_config",
                    component="ConfigValidator",
                    app_name=values.get("app_name"),
                    environment=values.get("environment"),
                ),
                suggestions=["Check the deployment inputs passed to autodeploy"],
            )

        known = set(DeploymentRequest.field_names())
        unknown = sorted(k for k in values if k not in known)
        if unknown:
            logger.debug("Ignoring unknown configuration keys: %s", ", ".join(unknown))

        kwargs = {k: v for k, v in values.items() if k in known and v not in (None, "")}
        kwargs["platform"] = resolve_platform(values["platform"]).value
        kwargs["health_check_timeout"] = int(
            kwargs.get("health_check_timeout", DEFAULT_HEALTH_CHECK_TIMEOUT)
        )
        kwargs["rollback_on_failure"] = bool(parse_bool(kwargs.get("rollback_on_failure", False)))
        return DeploymentRequest(**kwargs)
