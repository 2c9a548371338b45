"""
Constants and configuration defaults for promptline.
"""
import os
from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "promptline"
APP_VERSION: Final[str] = "0.4.0"
APP_DESCRIPTION: Final[str] = "A fast, configurable prompt for any shell"

CONFIG_DIR: Final[Path] = Path.home() / ".config"
CONFIG_FILE: Final[Path] = CONFIG_DIR / "promptline.json"
CACHE_DIR: Final[Path] = Path.home() / ".cache" / "promptline"

# Environment variables
CONFIG_ENV_VAR: Final[str] = "PROMPTLINE_CONFIG"
SHELL_ENV_VAR: Final[str] = "PROMPTLINE_SHELL"
LOG_ENV_VAR: Final[str] = "PROMPTLINE_LOG"

DEFAULT_FORMAT: Final[str] = "\n$all"
DEFAULT_SCAN_TIMEOUT_MS: Final[int] = 30
FALLBACK_PROMPT: Final[str] = ">"

# Groups nested deeper than this are rejected by the parser
MAX_NESTING_DEPTH: Final[int] = 64

LINE_BREAK_SENTINEL: Final[str] = "\n"

# Default order used by the `$all` variable
PROMPT_ORDER: Final[tuple[str, ...]] = (
    "username",
    "hostname",
    "directory",
    "git_branch",
    "hg_branch",
    # Toolchain version modules
    "python",
    "cmd_duration",
    "custom",
    LINE_BREAK_SENTINEL,
    "jobs",
    "time",
    "character",
)

# Shell used for custom commands when nothing else is configured
DEFAULT_COMMAND_SHELL: Final[str] = "cmd.exe" if os.name == "nt" else "sh"
