"""
Mercurial branch module.

Shows the active bookmark, or else the branch name, when the current
directory is the root of a Mercurial repository.
"""
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module
from ..utils import truncate_string

logger = logging.getLogger(__name__)

DESCRIPTION = "The active branch of the repo in your current directory"


@dataclass
class HgBranchConfig(ModuleConfig):
    symbol: str = " "
    style: str = "bold purple"
    format: str = "on [$symbol$branch]($style) "
    truncation_length: int = sys.maxsize
    truncation_symbol: str = "…"
    disabled: bool = True


def module(context: Context) -> Optional[Module]:
    if not context.try_begin_scan().set_folders([".hg"]).is_match():
        return None

    module = context.new_module("hg_branch")
    config = HgBranchConfig.load(module.config)

    length = config.truncation_length
    if length <= 0:
        logger.warning(
            f"\"truncation_length\" should be a positive value, found {length}"
        )
        length = sys.maxsize

    branch_name = get_hg_current_bookmark(context) or get_hg_branch_name(context)
    # Only the first character of the symbol is used
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
        logger.warning(f"Error in module `hg_branch`:\n{e}")
        return None

    module.set_segments(segments)
    return module


def get_hg_branch_name(context: Context) -> str:
    try:
        return (context.current_dir / ".hg" / "branch").read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return "default"


def get_hg_current_bookmark(context: Context) -> Optional[str]:
    try:
        bookmark = (context.current_dir / ".hg" / "bookmarks.current").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    return bookmark.strip() or None
