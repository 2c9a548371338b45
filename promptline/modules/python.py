"""
Python module.

Shown in directories that look like Python projects. Displays the
interpreter version and the name of the active virtual environment.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..io_handlers.shell_runner import exec_cmd
from ..module import Module
from ..utils import is_windows

logger = logging.getLogger(__name__)

DESCRIPTION = "The currently installed version of Python"


@dataclass
class PythonConfig(ModuleConfig):
    symbol: str = "🐍 "
    style: str = "yellow bold"
    format: str = "[via [$symbol$version[ \\($virtualenv\\)]]($style) ]"
    python_binary: str = "python" if is_windows() else "python3"
    detect_files: list = field(default_factory=lambda: [
        "requirements.txt",
        ".python-version",
        "pyproject.toml",
        "Pipfile",
        "tox.ini",
        "setup.py",
        "__init__.py",
    ])
    detect_extensions: list = field(default_factory=lambda: ["py"])
    detect_folders: list = field(default_factory=list)


def module(context: Context) -> Optional[Module]:
    module = context.new_module("python")
    config = PythonConfig.load(module.config)

    is_py_project = (
        context.try_begin_scan()
        .set_files(config.detect_files)
        .set_extensions(config.detect_extensions)
        .set_folders(config.detect_folders)
        .is_match()
    )
    virtual_env = context.get_env("VIRTUAL_ENV")

    if not is_py_project and not virtual_env:
        return None

    version = get_python_version(context, config.python_binary)
    virtualenv = Path(virtual_env).name if virtual_env else ""

    try:
        segments = (
            StringFormatter(config.format)
            .map_meta(lambda var: config.symbol if var == "symbol" else None)
            .map_style(lambda var: config.style if var == "style" else None)
            .map(lambda var: {
                "version": version,
                "virtualenv": virtualenv,
            }.get(var))
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `python`:\n{e}")
        return None

    module.set_segments(segments)
    return module


def get_python_version(context: Context, binary: str) -> Optional[str]:
    result = exec_cmd([binary, "--version"], env=context.env, cwd=str(context.current_dir))
    if result is None or not result.success:
        return None
    # Python 2 prints its version to stderr
    return format_python_version(result.stdout or result.stderr)


def format_python_version(output: str) -> Optional[str]:
    """Turn ``Python 3.12.1`` into ``v3.12.1``."""
    parts = output.strip().split()
    if len(parts) < 2:
        return None
    return f"v{parts[1]}"
