"""
Directory module.

Shows the current directory, with the home directory contracted to a
symbol and long paths truncated to their last few components.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module

logger = logging.getLogger(__name__)

DESCRIPTION = "The current working directory"


@dataclass
class DirectoryConfig(ModuleConfig):
    truncation_length: int = 3
    truncation_symbol: str = ""
    home_symbol: str = "~"
    read_only: str = " 🔒"
    read_only_style: str = "red"
    style: str = "bold cyan"
    format: str = "[$path]($style)[$read_only]($read_only_style) "


def module(context: Context) -> Optional[Module]:
    module = context.new_module("directory")
    config = DirectoryConfig.load(module.config)

    home = context.get_env("HOME") or context.get_env("USERPROFILE")
    path = contract_path(context.current_dir, Path(home) if home else None, config.home_symbol)
    path = truncate_path(path, config.truncation_length, config.truncation_symbol)

    read_only = "" if os.access(context.current_dir, os.W_OK) else config.read_only

    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda var: {
                "style": config.style,
                "read_only_style": config.read_only_style,
            }.get(var))
            .map(lambda var: {
                "path": path,
                "read_only": read_only,
            }.get(var))
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `directory`:\n{e}")
        return None

    module.set_segments(segments)
    return module


def contract_path(path: Path, home: Optional[Path], home_symbol: str) -> str:
    """Replace a leading home directory with `home_symbol`."""
    if home is None:
        return str(path)
    try:
        relative = path.relative_to(home)
    except ValueError:
        return str(path)
    if str(relative) == ".":
        return home_symbol
    return f"{home_symbol}/{relative.as_posix()}"


def truncate_path(path: str, length: int, symbol: str = "") -> str:
    """Keep the last `length` components of a path.

    A length of 0 disables truncation.
    """
    if length <= 0:
        return path
    components = [c for c in path.replace("\\", "/").split("/") if c]
    if len(components) <= length:
        return path
    return symbol + "/".join(components[-length:])
