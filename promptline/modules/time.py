"""
Time module. Disabled by default.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module
from ..utils import format_timestamp

logger = logging.getLogger(__name__)

DESCRIPTION = "The current local time"


@dataclass
class TimeConfig(ModuleConfig):
    format: str = "at [$time]($style) "
    style: str = "bold yellow"
    time_format: str = "%H:%M:%S"
    disabled: bool = True


def module(context: Context) -> Optional[Module]:
    module = context.new_module("time")
    config = TimeConfig.load(module.config)

    formatted = format_timestamp(fmt=config.time_format)

    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda var: config.style if var == "style" else None)
            .map(lambda var: formatted if var == "time" else None)
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `time`:\n{e}")
        return None

    module.set_segments(segments)
    return module
