"""
Git branch module.

Shows the checked-out branch, or the abbreviated commit hash when HEAD is
detached, for the repository containing the current directory.
"""
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module
from ..utils import truncate_string

logger = logging.getLogger(__name__)

DESCRIPTION = "The active branch of the repo in your current directory"

HEAD_REF_PREFIX = "ref: refs/heads/"


@dataclass
class GitBranchConfig(ModuleConfig):
    symbol: str = " "
    style: str = "bold purple"
    format: str = "on [$symbol$branch]($style) "
    truncation_length: int = sys.maxsize
    truncation_symbol: str = "…"


def module(context: Context) -> Optional[Module]:
    git_dir = find_git_dir(context.current_dir)
    if git_dir is None:
        return None

    branch_name = read_head(git_dir)
    if branch_name is None:
        return None

    module = context.new_module("git_branch")
    config = GitBranchConfig.load(module.config)

    length = config.truncation_length
    if length <= 0:
        logger.warning(
            f"\"truncation_length\" should be a positive value, found {length}"
        )
        length = sys.maxsize
    branch = truncate_string(branch_name, length, config.truncation_symbol[:1])

    try:
        segments = (
            StringFormatter(config.format)
            .map_meta(lambda var: config.symbol if var == "symbol" else None)
            .map_style(lambda var: config.style if var == "style" else None)
            .map(lambda var: branch if var == "branch" else None)
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `git_branch`:\n{e}")
        return None

    module.set_segments(segments)
    return module


def find_git_dir(start: Path) -> Optional[Path]:
    """Find the git directory for `start` or its nearest ancestor.

    Follows `gitdir:` files used by worktrees and submodules.
    """
    for directory in (start, *start.parents):
        candidate = directory / ".git"
        if candidate.is_dir():
            return candidate
        if candidate.is_file():
            try:
                content = candidate.read_text(encoding="utf-8").strip()
            except (OSError, UnicodeDecodeError):
                return None
            if content.startswith("gitdir:"):
                git_dir = Path(content[len("gitdir:"):].strip())
                return git_dir if git_dir.is_absolute() else directory / git_dir
            return None
    return None


def read_head(git_dir: Path) -> Optional[str]:
    try:
        head = (git_dir / "HEAD").read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read {git_dir / 'HEAD'}: {e}")
        return None

    if head.startswith(HEAD_REF_PREFIX):
        return head[len(HEAD_REF_PREFIX):]
    # Detached HEAD
    return head[:7] or None
