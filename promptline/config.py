"""
Configuration management for promptline.

Loads the JSON configuration file and exposes typed views of the root
settings, builtin module tables and custom module tables.
"""
import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional, TypeVar

from .constants import (
    CONFIG_ENV_VAR,
    CONFIG_FILE,
    DEFAULT_FORMAT,
    DEFAULT_SCAN_TIMEOUT_MS,
)

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='ModuleConfig')

# Root keys that are not module tables
ROOT_KEYS = frozenset({"format", "scan_timeout", "custom"})
LEGACY_ROOT_KEYS = frozenset({"prompt_order", "add_newline"})


class ConfigError(Exception):
    """Raised when configuration parsing or validation fails."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.line = line
        self.column = column

        if line is not None and column is not None:
            full_message = f"{message} (line {line}, column {column})"
        elif line is not None:
            full_message = f"{message} (line {line})"
        else:
            full_message = message

        super().__init__(full_message)


@dataclass
class ModuleConfig:
    """Base for module configuration dataclasses.

    Subclasses declare fields with defaults; `load` overrides them from a
    configuration table.
    """
    disabled: bool = False

    @classmethod
    def load(cls: type[T], data: Optional[Mapping[str, Any]]) -> T:
        """Create a config from a table, keeping defaults for bad values.

        Args:
            data: The module's configuration table, or None.

        Returns:
            A config instance. Unknown keys are logged and ignored; values of
            the wrong type are logged and replaced by the default.
        """
        config = cls()
        if not data:
            return config

        known = {f.name: f for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                logger.debug(f"Unknown key '{key}' in {cls.__name__}")
                continue

            default = getattr(config, key)
            if default is not None and not _same_type(default, value):
                logger.warning(
                    f"Expected {type(default).__name__} for '{key}' in "
                    f"{cls.__name__}, got {type(value).__name__}"
                )
                continue
            setattr(config, key, value)

        return config


def _same_type(default: Any, value: Any) -> bool:
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(default, bool) and isinstance(value, bool)
    if isinstance(default, (int, float)) and isinstance(value, (int, float)):
        return True
    if isinstance(default, (list, tuple, set, frozenset)):
        return isinstance(value, (list, tuple))
    return isinstance(value, type(default))


@dataclass
class RootConfig:
    """Top-level prompt settings."""
    format: str = DEFAULT_FORMAT
    scan_timeout: int = DEFAULT_SCAN_TIMEOUT_MS


@dataclass
class CustomModuleConfig(ModuleConfig):
    """Configuration for a user-defined module.

    The module shows when any of `files`, `extensions` or `directories`
    matches the current directory, or else when the `when` command exits
    with status 0. Its text is the trimmed output of `command`.
    """
    command: str = ""
    when: Optional[str] = None
    shell: Optional[str] = None
    files: list = field(default_factory=list)
    extensions: list = field(default_factory=list)
    directories: list = field(default_factory=list)
    symbol: Optional[str] = None
    style: str = "bold green"
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    description: str = "<custom module>"


class PromptConfig:
    """Read-only view over a parsed configuration dictionary.

    Example:
        config = PromptConfig({"format": "$directory$character",
                               "directory": {"truncation_length": 2}})
        config.get_root_config().format
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def get_root_config(self) -> RootConfig:
        root = RootConfig()
        fmt = self._data.get("format")
        if isinstance(fmt, str):
            root.format = fmt
        elif fmt is not None:
            logger.warning("Expected a string for 'format', using the default")

        timeout = self._data.get("scan_timeout")
        if isinstance(timeout, int) and not isinstance(timeout, bool):
            root.scan_timeout = timeout
        elif timeout is not None:
            logger.warning("Expected an integer for 'scan_timeout', using the default")

        return root

    def get_module_config(self, name: str) -> Optional[dict[str, Any]]:
        """Get a builtin module's configuration table."""
        value = self._data.get(name)
        if name in ROOT_KEYS or not isinstance(value, dict):
            return None
        return value

    def get_custom_modules(self) -> Optional[dict[str, dict[str, Any]]]:
        """Get all custom module tables in definition order."""
        custom = self._data.get("custom")
        if not isinstance(custom, dict):
            return None
        return {k: v for k, v in custom.items() if isinstance(v, dict)}

    def get_custom_module_config(self, name: str) -> Optional[dict[str, Any]]:
        modules = self.get_custom_modules()
        if modules is None:
            return None
        return modules.get(name)

    def has_legacy_keys(self) -> bool:
        """Whether the configuration still uses pre-`format` root keys."""
        return any(key in self._data for key in LEGACY_ROOT_KEYS)


def validate_config(data: Any) -> tuple[bool, list[str]]:
    """Validate a configuration dictionary.

    Args:
        data: The decoded JSON configuration.

    Returns:
        A tuple of (is_valid, errors).
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        return False, ["Configuration must be an object"]

    if "format" in data and not isinstance(data["format"], str):
        errors.append("Field 'format' must be a string")

    if "scan_timeout" in data:
        timeout = data["scan_timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 0:
            errors.append("Field 'scan_timeout' must be a non-negative integer")

    if "custom" in data:
        custom = data["custom"]
        if not isinstance(custom, dict):
            errors.append("Field 'custom' must be an object")
        else:
            for name, table in custom.items():
                if not isinstance(table, dict):
                    errors.append(f"Custom module '{name}' must be an object")
                    continue
                if not isinstance(table.get("command"), str):
                    errors.append(f"Custom module '{name}.command' must be a string")
                for key in ("files", "extensions", "directories"):
                    if key not in table:
                        continue
                    if not isinstance(table[key], list):
                        errors.append(f"Custom module '{name}.{key}' must be an array")
                    elif not all(isinstance(item, str) for item in table[key]):
                        errors.append(f"Custom module '{name}.{key}' must contain only strings")
                for key in ("when", "shell", "symbol", "style", "prefix", "suffix", "description"):
                    if table.get(key) is not None and not isinstance(table[key], str):
                        errors.append(f"Custom module '{name}.{key}' must be a string")

    from .modules import ALL_MODULES

    for key, value in data.items():
        if key in ROOT_KEYS or key in LEGACY_ROOT_KEYS:
            continue
        if not isinstance(value, dict):
            if key in ALL_MODULES:
                errors.append(f"Module '{key}' must be an object")
            else:
                # e.g. "$schema"
                logger.debug(f"Ignoring unknown root key '{key}'")
        elif "disabled" in value and not isinstance(value["disabled"], bool):
            errors.append(f"Module '{key}.disabled' must be a boolean")

    return len(errors) == 0, errors


def import_config(json_str: str) -> PromptConfig:
    """Deserialize a configuration from a JSON string.

    Raises:
        ConfigError: If the JSON is malformed or validation fails.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON: {e.msg}",
            line=e.lineno,
            column=e.colno,
        )

    is_valid, errors = validate_config(data)
    if not is_valid:
        raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}")

    return PromptConfig(data)


def get_config_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Locate the configuration file, honouring the environment override."""
    env = os.environ if env is None else env
    override = env.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


def load_config(path: Optional[Path] = None) -> PromptConfig:
    """Load the configuration file.

    A missing file gives the defaults. A malformed file is logged and also
    gives the defaults, so a broken config never breaks the prompt.
    """
    path = path or get_config_path()

    if not path.exists():
        logger.debug(f"No configuration file at {path}, using defaults")
        return PromptConfig()

    try:
        return import_config(path.read_text(encoding='utf-8'))
    except ConfigError as e:
        logger.warning(f"Failed to load config file {path}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read config file {path}: {e}")

    return PromptConfig()
