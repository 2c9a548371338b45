"""
Builtin prompt modules.

Every builtin exposes ``module(context) -> Optional[Module]`` plus a
description and a config dataclass. The registry below maps module names
to them in a fixed order.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import ModuleConfig
from ..context import Context
from ..module import Module
from . import (
    character,
    cmd_duration,
    directory,
    git_branch,
    hg_branch,
    hostname,
    jobs,
    line_break,
    python,
    time,
    username,
)

logger = logging.getLogger(__name__)

ModuleDetector = Callable[[Context], Optional[Module]]


@dataclass(frozen=True)
class BuiltinModule:
    """Registry entry for a builtin module."""
    detect: ModuleDetector
    description: str
    config_class: type[ModuleConfig]


BUILTIN_MODULES: dict[str, BuiltinModule] = {
    "character": BuiltinModule(character.module, character.DESCRIPTION, character.CharacterConfig),
    "cmd_duration": BuiltinModule(cmd_duration.module, cmd_duration.DESCRIPTION, cmd_duration.CmdDurationConfig),
    "directory": BuiltinModule(directory.module, directory.DESCRIPTION, directory.DirectoryConfig),
    "git_branch": BuiltinModule(git_branch.module, git_branch.DESCRIPTION, git_branch.GitBranchConfig),
    "hg_branch": BuiltinModule(hg_branch.module, hg_branch.DESCRIPTION, hg_branch.HgBranchConfig),
    "hostname": BuiltinModule(hostname.module, hostname.DESCRIPTION, hostname.HostnameConfig),
    "jobs": BuiltinModule(jobs.module, jobs.DESCRIPTION, jobs.JobsConfig),
    "line_break": BuiltinModule(line_break.module, line_break.DESCRIPTION, line_break.LineBreakConfig),
    "python": BuiltinModule(python.module, python.DESCRIPTION, python.PythonConfig),
    "time": BuiltinModule(time.module, time.DESCRIPTION, time.TimeConfig),
    "username": BuiltinModule(username.module, username.DESCRIPTION, username.UsernameConfig),
}

ALL_MODULES: tuple[str, ...] = tuple(BUILTIN_MODULES)


def handle(name: str, context: Context) -> Optional[Module]:
    """Run a builtin module's detector.

    A detector that raises is logged and treated as producing nothing, so one
    broken module cannot break the prompt.
    """
    builtin = BUILTIN_MODULES.get(name)
    if builtin is None:
        logger.debug(f"Unknown module '{name}'")
        return None

    try:
        return builtin.detect(context)
    except Exception as e:
        logger.warning(f"Error in module `{name}`: {e}")
        return None


def get_description(name: str) -> str:
    builtin = BUILTIN_MODULES.get(name)
    return builtin.description if builtin else ""


def is_module_disabled_by_default(name: str) -> bool:
    """Get the default `disabled` value of a builtin; unknown names are disabled."""
    builtin = BUILTIN_MODULES.get(name)
    if builtin is None:
        return True
    return builtin.config_class().disabled
