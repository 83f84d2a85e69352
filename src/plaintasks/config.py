"""
Configuration file parsing for the PlainTasks language server.

Configuration is read from up to three YAML files, least specific first:
the machine config, the user config and a project config found by walking
up from the workspace root. Example::

    completion:
      tags: [waiting, someday]
    log_level: debug
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import platformdirs
import yaml

from plaintasks.logging import LogLevel

__all__ = [
    "PROJECT_CONFIG_NAME",
    "ServerConfig",
    "ConfigError",
    "get_user_config_path",
    "get_machine_config_path",
    "find_project_config",
    "parse_config_file",
    "merge_configs",
    "load_config",
]

PROJECT_CONFIG_NAME = ".plaintasks-config.yml"


@dataclass
class ServerConfig:
    """
    Settings that tune the language server.

    Attributes:
        extra_tags: Tag names offered by completion in addition to the
            built-in vocabulary
        log_level: Verbosity requested by the config, or None to keep the
            default
    """

    extra_tags: list[str] = field(default_factory=list)
    log_level: Optional[LogLevel] = None


class ConfigError(Exception):
    """
    Raised when a configuration file is invalid.
    """

    pass


def get_machine_config_path() -> Path:
    """
    Get the path to the machine-level (system-wide) configuration file.

    Returns:
        Path to the machine config file (may not exist)
    """
    config_dir = Path(platformdirs.site_config_dir("plaintasks"))
    return config_dir / "config.yml"


def get_user_config_path() -> Path:
    """
    Get the path to the user-level configuration file.

    Returns:
        Path to the user config file (may not exist)
    """
    config_dir: Path = Path(platformdirs.user_config_dir("plaintasks"))
    return config_dir / "config.yml"


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find .plaintasks-config.yml.

    Args:
        start_dir: Directory to start searching from

    Returns:
        Path to .plaintasks-config.yml if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        # resolve() can raise OSError on invalid paths or RuntimeError on symlink loops
        return None

    # Safety limit against pathological directory structures
    max_depth = 100
    for _ in range(max_depth):
        try:
            config_path = current / PROJECT_CONFIG_NAME
            if config_path.exists():
                return config_path
        except (OSError, PermissionError):
            pass

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def parse_config_file(path: Path) -> Optional[ServerConfig]:
    """
    Parse a PlainTasks configuration file.

    Args:
        path: Path to the configuration file

    Returns:
        ServerConfig for the file, or None if the file doesn't exist or is empty

    Raises:
        ConfigError: If the file cannot be read, is malformed YAML, or has
                     fields of the wrong type
    """
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (IOError, OSError) as e:
        raise ConfigError(f"Error reading config file '{path}': {e}") from e

    if not content.strip():
        return None

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in config file '{path}': {e}") from e

    if data is None:
        return None

    if not isinstance(data, dict):
        raise ConfigError(f"Error in config file '{path}': top level must be a dictionary")

    config = ServerConfig()

    completion = data.get("completion", {}) or {}
    if not isinstance(completion, dict):
        raise ConfigError(
            f"Error in config file '{path}': 'completion' must be a dictionary"
        )

    tags = completion.get("tags", []) or []
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise ConfigError(
            f"Error in config file '{path}': Field 'completion.tags' must be a list of strings"
        )
    # Accept "@waiting" as well as "waiting"
    config.extra_tags = [tag.lstrip("@") for tag in tags if tag.lstrip("@")]

    log_level = data.get("log_level")
    if log_level is not None:
        if not isinstance(log_level, str):
            raise ConfigError(
                f"Error in config file '{path}': Field 'log_level' must be a string"
            )
        try:
            config.log_level = LogLevel.from_name(log_level)
        except ValueError as e:
            raise ConfigError(f"Error in config file '{path}': {e}") from e

    return config


def merge_configs(configs: Iterable[Optional[ServerConfig]]) -> ServerConfig:
    """
    Merge configs given from least to most specific.

    Tag lists are combined (first occurrence keeps its place); the last
    non-None log level wins.
    """
    merged = ServerConfig()
    for config in configs:
        if config is None:
            continue
        for tag in config.extra_tags:
            if tag not in merged.extra_tags:
                merged.extra_tags.append(tag)
        if config.log_level is not None:
            merged.log_level = config.log_level
    return merged


def load_config(
    project_dir: Optional[Path] = None, extra_path: Optional[Path] = None
) -> ServerConfig:
    """
    Load and merge the machine, user and project configuration.

    Args:
        project_dir: Directory to search upwards from for a project config
        extra_path: Explicit config file applied after all others

    Raises:
        ConfigError: If any of the files found is invalid
    """
    paths: list[Path] = [get_machine_config_path(), get_user_config_path()]
    if project_dir is not None:
        project_config = find_project_config(project_dir)
        if project_config is not None:
            paths.append(project_config)
    if extra_path is not None:
        if not extra_path.exists():
            raise ConfigError(f"Config file '{extra_path}' does not exist")
        paths.append(extra_path)

    return merge_configs(parse_config_file(path) for path in paths)
