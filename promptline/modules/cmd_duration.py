"""
Command duration module.

Shows how long the last command took when it ran for at least `min_time`
milliseconds. The duration is passed by the shell integration.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module
from ..utils import format_duration

logger = logging.getLogger(__name__)

DESCRIPTION = "How long the last command took to execute"


@dataclass
class CmdDurationConfig(ModuleConfig):
    min_time: int = 2_000
    show_milliseconds: bool = False
    format: str = "took [$duration]($style) "
    style: str = "bold yellow"


def module(context: Context) -> Optional[Module]:
    raw = context.properties.get("cmd_duration")
    if raw is None:
        return None
    try:
        elapsed = int(raw)
    except ValueError:
        logger.debug(f"Invalid command duration '{raw}'")
        return None

    module = context.new_module("cmd_duration")
    config = CmdDurationConfig.load(module.config)

    if elapsed < config.min_time:
        return None

    duration = format_duration(elapsed, config.show_milliseconds)

    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda var: config.style if var == "style" else None)
            .map(lambda var: duration if var == "duration" else None)
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `cmd_duration`:\n{e}")
        return None

    module.set_segments(segments)
    return module
