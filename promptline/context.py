"""
Context - the read-only snapshot a prompt is rendered against.

Holds the working directory, shell, configuration and environment, plus a
directory listing that is computed lazily, once, and shared by every
module that scans the current directory.
"""
import logging
import os
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping, Optional

from .config import CustomModuleConfig, PromptConfig
from .constants import SHELL_ENV_VAR
from .module import Module

logger = logging.getLogger(__name__)


class Shell(str, Enum):
    """Shells with prompt-specific rendering rules."""
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"
    ION = "ion"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "Shell":
        """Map a shell name or path (e.g., "/usr/bin/zsh") to a Shell."""
        if not name:
            return cls.UNKNOWN
        base = Path(name).name.lower()
        if base.endswith(".exe"):
            base = base[:-4]
        if base in ("pwsh", "powershell"):
            return cls.POWERSHELL
        try:
            return cls(base)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class DirContents:
    """Names found in a directory, split by kind."""
    files: frozenset = frozenset()
    extensions: frozenset = frozenset()
    folders: frozenset = frozenset()

    @classmethod
    def from_path(cls, path: Path, timeout_ms: Optional[int] = None) -> "DirContents":
        """List the immediate entries of a directory.

        Args:
            path: The directory to list.
            timeout_ms: Stop listing after this many milliseconds and keep
                whatever was seen so far.

        Returns:
            The directory contents. Listing errors give empty contents.
        """
        files: set[str] = set()
        extensions: set[str] = set()
        folders: set[str] = set()
        start = time.monotonic()

        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    if timeout_ms is not None and (time.monotonic() - start) * 1000 > timeout_ms:
                        logger.debug(f"Scanning {path} took longer than {timeout_ms}ms")
                        break
                    try:
                        is_dir = entry.is_dir()
                    except OSError:
                        is_dir = False
                    if is_dir:
                        folders.add(entry.name)
                    else:
                        files.add(entry.name)
                        extension = Path(entry.name).suffix
                        if extension:
                            extensions.add(extension[1:])
        except OSError as e:
            logger.debug(f"Could not list {path}: {e}")
            return cls()

        return cls(frozenset(files), frozenset(extensions), frozenset(folders))


class ScanDir:
    """Builder that checks a directory listing against match criteria.

    Each setter adds to the criteria. `is_match` is true when any requested
    file, extension or folder is present; empty criteria never match.

    Example:
        is_python = (
            context.try_begin_scan()
            .set_files(["pyproject.toml"])
            .set_extensions(["py"])
            .is_match()
        )
    """

    def __init__(self, contents: DirContents) -> None:
        self._contents = contents
        self._files: set[str] = set()
        self._extensions: set[str] = set()
        self._folders: set[str] = set()

    def set_files(self, names: Iterable[str]) -> "ScanDir":
        self._files.update(names)
        return self

    def set_extensions(self, extensions: Iterable[str]) -> "ScanDir":
        self._extensions.update(ext.lstrip(".") for ext in extensions)
        return self

    def set_folders(self, names: Iterable[str]) -> "ScanDir":
        self._folders.update(names)
        return self

    def is_match(self) -> bool:
        return bool(
            self._files & self._contents.files
            or self._extensions & self._contents.extensions
            or self._folders & self._contents.folders
        )


class Context:
    """Everything a module may read while the prompt is rendered.

    A Context is built once per invocation and never mutated afterwards,
    except for the lazily computed directory listing.
    """

    def __init__(
        self,
        current_dir: Optional[Path] = None,
        config: Optional[PromptConfig] = None,
        shell: Optional[Shell] = None,
        env: Optional[Mapping[str, str]] = None,
        properties: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize the context.

        Args:
            current_dir: Directory the prompt describes (defaults to cwd)
            config: Parsed configuration (defaults to an empty one)
            shell: Shell to render for (defaults to the one named by the
                shell environment variable)
            env: Environment snapshot (defaults to os.environ)
            properties: Values passed by the shell, e.g. "status",
                "cmd_duration" and "jobs"
        """
        self.env: dict[str, str] = dict(os.environ if env is None else env)
        self.current_dir = Path(current_dir) if current_dir else Path(os.getcwd())
        self.config = config or PromptConfig()
        self.shell = shell or Shell.from_name(self.env.get(SHELL_ENV_VAR))
        self.properties: dict[str, str] = dict(properties or {})
        self._dir_contents: Optional[DirContents] = None
        self._scan_lock = threading.Lock()

    def get_env(self, key: str) -> Optional[str]:
        return self.env.get(key)

    def dir_contents(self) -> DirContents:
        """Get the current directory's listing, computing it at most once."""
        if self._dir_contents is None:
            with self._scan_lock:
                if self._dir_contents is None:
                    timeout = self.config.get_root_config().scan_timeout
                    self._dir_contents = DirContents.from_path(self.current_dir, timeout)
        return self._dir_contents

    def try_begin_scan(self) -> ScanDir:
        """Start a match against the current directory."""
        return ScanDir(self.dir_contents())

    def is_module_disabled_in_config(self, name: str) -> bool:
        """Whether a builtin module is disabled, falling back to its default."""
        from .modules import is_module_disabled_by_default

        table = self.config.get_module_config(name)
        if table is not None and isinstance(table.get("disabled"), bool):
            return table["disabled"]
        return is_module_disabled_by_default(name)

    def is_custom_module_disabled_in_config(self, name: str) -> Optional[bool]:
        """Whether a custom module is disabled.

        Returns:
            None when no custom module of that name is configured.
        """
        table = self.config.get_custom_module_config(name)
        if table is None:
            return None
        return CustomModuleConfig.load(table).disabled

    def new_module(self, name: str) -> Module:
        """Create an empty module carrying its description and config table."""
        from .modules import get_description

        return Module(name, get_description(name), self.config.get_module_config(name))
