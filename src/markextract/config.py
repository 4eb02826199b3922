#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/markextract/config.py
"""Configuration file discovery and loading.

Options can be stored in a dedicated file or in ``pyproject.toml``:

- ``.markextract.toml``
- ``.markextract.yaml`` / ``.markextract.yml``
- ``.markextract.json``
- ``pyproject.toml`` with a ``[tool.markextract]`` table

Keys are option field names in snake_case or camelCase (``tableHandling``
and ``table_handling`` are equivalent). ``custom_rules`` entries are tables
with ``selector``, ``replacement`` and optional ``priority`` keys.

Environment variables named ``MARKEXTRACT_<FIELD>`` (for example
``MARKEXTRACT_TABLE_HANDLING=remove``) override file values for boolean and
string options.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from collections.abc import Mapping
from dataclasses import fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]

import yaml

from markextract.constants import CONFIG_FILENAMES, ENV_PREFIX
from markextract.exceptions import ConfigurationError, ValidationError
from markextract.options import ConversionOptions, CustomRule

logger = logging.getLogger(__name__)

PYPROJECT_FILENAME = "pyproject.toml"
PYPROJECT_SECTION = "markextract"

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _load_pyproject_section(pyproject_path: Path) -> dict[str, Any]:
    """Load the ``[tool.markextract]`` table of a pyproject.toml file.

    Returns an empty dict when the table does not exist.

    Raises
    ------
    ConfigurationError
        If the file is not valid TOML or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {pyproject_path}: {e}", config_path=str(pyproject_path), original_error=e
        ) from e

    section = data.get("tool", {}).get(PYPROJECT_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"[tool.{PYPROJECT_SECTION}] in {pyproject_path} must be a table, got {type(section).__name__}",
            config_path=str(pyproject_path),
        )
    return section


def find_config_in_parents(start_dir: Path | None = None) -> Path | None:
    """Find a configuration file in ``start_dir`` or any of its parents.

    Each directory is checked for the dedicated config files in priority
    order, then for a pyproject.toml carrying a ``[tool.markextract]`` table.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory, defaults to the current working directory

    Returns
    -------
    Path or None
        First configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()
    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / PYPROJECT_FILENAME
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except ConfigurationError as e:
                logger.debug("Skipping unreadable %s: %s", pyproject_path, e)

        parent = current.parent
        if parent == current:
            return None
        current = parent


def discover_config_file(start_dir: Path | None = None) -> Path | None:
    """Search parent directories, then the user's home directory."""
    config_path = find_config_in_parents(start_dir)
    if config_path is not None:
        return config_path

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        candidate = home / filename
        if candidate.is_file():
            return candidate
    return None


def load_config_file(config_path: Path | str) -> dict[str, Any]:
    """Load a configuration mapping from a TOML, YAML, JSON or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Configuration file

    Returns
    -------
    dict
        Raw configuration mapping

    Raises
    ------
    ConfigurationError
        If the file is missing, has an unsupported extension or cannot be
        parsed

    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file does not exist: {config_path}", config_path=str(config_path))

    ext = config_path.suffix.lower()
    try:
        if config_path.name.lower() == PYPROJECT_FILENAME:
            config: Any = _load_pyproject_section(config_path)
        elif ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise ConfigurationError(
                f"Unsupported config file format: {ext}. Use .toml, .yaml or .json", config_path=str(config_path)
            )
    except ConfigurationError:
        raise
    except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Error reading config file {config_path}: {e}", config_path=str(config_path), original_error=e
        ) from e

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping, got {type(config).__name__}",
            config_path=str(config_path),
        )
    logger.debug("Loaded configuration from %s", config_path)
    return config


def normalize_key(key: str) -> str:
    """Convert camelCase or kebab-case option names to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", key.replace("-", "_")).lower()


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValidationError(
        f"Option {name!r} expects a boolean, got {value!r}", parameter_name=name, parameter_value=value
    )


def _parse_custom_rule(entry: Any) -> CustomRule:
    if isinstance(entry, CustomRule):
        return entry
    if not isinstance(entry, Mapping) or "selector" not in entry or "replacement" not in entry:
        raise ValidationError(
            "custom_rules entries need 'selector' and 'replacement' keys",
            parameter_name="custom_rules",
            parameter_value=entry,
        )
    return CustomRule(
        selector=str(entry["selector"]),
        replacement=entry["replacement"],
        priority=int(entry.get("priority", 0)),
    )


def options_from_mapping(mapping: Mapping[str, Any], base: ConversionOptions | None = None) -> ConversionOptions:
    """Build ``ConversionOptions`` from a configuration mapping.

    Parameters
    ----------
    mapping : Mapping
        Option values keyed by field name (snake_case or camelCase)
    base : ConversionOptions, optional
        Options the mapping is applied on top of

    Returns
    -------
    ConversionOptions
        Resulting options

    Raises
    ------
    ValidationError
        For unknown keys or invalid values

    """
    base = base or ConversionOptions()
    option_fields = {f.name: f for f in fields(ConversionOptions)}
    updates: dict[str, Any] = {}

    for raw_key, value in mapping.items():
        key = normalize_key(str(raw_key))
        if key not in option_fields:
            raise ValidationError(f"Unknown option: {raw_key!r}", parameter_name=str(raw_key), parameter_value=value)

        if isinstance(option_fields[key].default, bool):
            updates[key] = _parse_bool(key, value)
        elif key == "ignore_elements":
            items = value.split(",") if isinstance(value, str) else value
            updates[key] = tuple(str(item).strip().lower() for item in items if str(item).strip())
        elif key == "custom_rules":
            updates[key] = tuple(_parse_custom_rule(entry) for entry in value)
        else:
            updates[key] = value

    try:
        return base.create_updated(**updates)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid conversion options: {e}", original_error=e) from e


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect ``MARKEXTRACT_<FIELD>`` variables for known scalar options."""
    environ = os.environ if environ is None else environ
    names = ConversionOptions.field_names() - {"custom_rules"}
    overrides: dict[str, str] = {}
    for variable, value in environ.items():
        if not variable.startswith(ENV_PREFIX):
            continue
        key = variable[len(ENV_PREFIX) :].lower()
        if key in names:
            overrides[key] = value
    return overrides


def load_options(
    config_path: Path | str | None = None,
    discover: bool = True,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ConversionOptions:
    """Resolve options from a config file, the environment and explicit overrides.

    Priority, highest first: ``overrides``, environment variables, the
    explicit ``config_path`` (or the discovered file when ``discover`` is
    true), defaults.

    Raises
    ------
    ConfigurationError
        If a configuration file cannot be read
    ValidationError
        If any value is invalid

    """
    path = Path(config_path) if config_path is not None else (discover_config_file() if discover else None)

    options = ConversionOptions()
    if path is not None:
        options = options_from_mapping(load_config_file(path), options)

    env = env_overrides(environ)
    if env:
        logger.debug("Applying environment overrides: %s", sorted(env))
        options = options_from_mapping(env, options)

    if overrides:
        options = options_from_mapping(overrides, options)
    return options
