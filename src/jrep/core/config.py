#!/usr/bin/env python3
"""
JREP CONFIG - Persistent Defaults
---------------------------------
Loads optional user defaults from a YAML file. Command-line flags always
win over anything set here.

Lookup order (first hit wins):
  1. --config PATH
  2. $JREP_CONFIG
  3. ./.jrep.yaml
  4. ~/.config/jrep/config.yaml

Author: jrep maintainers
Date: 2026-10-19
"""

import os
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML, YAMLError

from jrep.core.errors import ConfigError

logger = logging.getLogger("jrep.config")

ENV_VAR = "JREP_CONFIG"
COLOR_CHOICES = ("auto", "always", "never")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class JrepConfig:
    """Defaults applied before the command line is considered."""
    color: str = "auto"
    line_number: bool = False
    with_filename: bool = False
    jump_forward: bool = True
    log_level: str = "WARNING"
    source: Optional[str] = None  # Path the values were loaded from, if any


def candidate_paths(explicit: Optional[str] = None) -> List[Path]:
    """Returns the config locations in the order they are searched."""
    if explicit:
        return [Path(explicit).expanduser()]

    candidates = []
    env_path = os.environ.get(ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser())
    candidates.append(Path.cwd() / ".jrep.yaml")
    candidates.append(Path.home() / ".config" / "jrep" / "config.yaml")
    return candidates


def load_config(explicit: Optional[str] = None) -> JrepConfig:
    """
    Finds and parses the first available config file.
    An explicit path that does not exist is an error; missing default
    locations are simply skipped.
    """
    for candidate in candidate_paths(explicit):
        if candidate.is_file():
            return parse_config(candidate.read_text(encoding="utf-8"), source=str(candidate))
        if explicit:
            raise ConfigError(f"Config file not found: {candidate}")

    logger.debug("No config file found; using built-in defaults")
    return JrepConfig()


def parse_config(text: str, source: str = "<string>") -> JrepConfig:
    """Validates YAML text into a JrepConfig."""
    yaml = YAML(typ="safe")
    try:
        data = yaml.load(text)
    except YAMLError as e:
        mark = getattr(e, "problem_mark", getattr(e, "context_mark", None))
        if mark:
            raise ConfigError(f"{source}:L{mark.line + 1}:C{mark.column + 1}: invalid YAML")
        raise ConfigError(f"{source}: invalid YAML: {e}")

    if data is None:
        return JrepConfig(source=source)
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping")

    known = {f.name for f in fields(JrepConfig)} - {"source"}
    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key '%s' in %s", key, source)
            continue
        values[key] = value

    config = JrepConfig(source=source, **values)
    _validate(config, source)
    logger.info("Loaded config from %s", source)
    return config


def _validate(config: JrepConfig, source: str):
    for name in ("line_number", "with_filename", "jump_forward"):
        if not isinstance(getattr(config, name), bool):
            raise ConfigError(f"{source}: '{name}' must be true or false")

    if config.color not in COLOR_CHOICES:
        raise ConfigError(f"{source}: 'color' must be one of {', '.join(COLOR_CHOICES)}")

    if not isinstance(config.log_level, str) or config.log_level.upper() not in LOG_LEVELS:
        raise ConfigError(f"{source}: 'log_level' must be one of {', '.join(LOG_LEVELS)}")
    config.log_level = config.log_level.upper()
