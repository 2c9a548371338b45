"""
Username module.

Shown for the root user, inside SSH sessions, when logged in as a
different user than the login name, or always with `show_always`.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module

logger = logging.getLogger(__name__)

DESCRIPTION = "The active user's username"


@dataclass
class UsernameConfig(ModuleConfig):
    format: str = "[$user]($style) in "
    style_root: str = "bold red"
    style_user: str = "bold yellow"
    show_always: bool = False


def module(context: Context) -> Optional[Module]:
    user = context.get_env("USER") or context.get_env("USERNAME")
    if not user:
        return None
    logname = context.get_env("LOGNAME")

    module = context.new_module("username")
    config = UsernameConfig.load(module.config)

    is_root = user == "root"
    is_ssh = bool(context.get_env("SSH_CONNECTION"))
    switched_user = bool(logname) and logname != user

    if not (config.show_always or is_root or is_ssh or switched_user):
        return None

    style = config.style_root if is_root else config.style_user

    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda var: style if var == "style" else None)
            .map(lambda var: user if var == "user" else None)
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `username`:\n{e}")
        return None

    module.set_segments(segments)
    return module
