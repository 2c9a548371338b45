"""
Character module.

The prompt character before the cursor. Switches to the error symbol when
the last command exited with a non-zero status.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module

logger = logging.getLogger(__name__)

DESCRIPTION = "A character (usually an arrow) beside where the text is entered in your terminal"


@dataclass
class CharacterConfig(ModuleConfig):
    format: str = "$symbol "
    success_symbol: str = "[❯](bold green)"
    error_symbol: str = "[❯](bold red)"


def module(context: Context) -> Optional[Module]:
    module = context.new_module("character")
    config = CharacterConfig.load(module.config)

    status = context.properties.get("status", "0")
    symbol = config.success_symbol if status == "0" else config.error_symbol

    try:
        segments = (
            StringFormatter(config.format)
            .map_meta(lambda var: symbol if var == "symbol" else None)
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `character`:\n{e}")
        return None

    module.set_segments(segments)
    return module
