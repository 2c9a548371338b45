"""
Jobs module.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module

logger = logging.getLogger(__name__)

DESCRIPTION = "The current number of jobs running"


@dataclass
class JobsConfig(ModuleConfig):
    threshold: int = 1
    format: str = "[$symbol$number]($style) "
    symbol: str = "✦"
    style: str = "bold blue"


def module(context: Context) -> Optional[Module]:
    try:
        num_jobs = int(context.properties.get("jobs", "0"))
    except ValueError:
        return None
    if num_jobs <= 0:
        return None

    module = context.new_module("jobs")
    config = JobsConfig.load(module.config)

    # The count is only worth showing above the threshold
    number = str(num_jobs) if num_jobs > config.threshold else ""

    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda var: config.style if var == "style" else None)
            .map(lambda var: {"symbol": config.symbol, "number": number}.get(var))
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `jobs`:\n{e}")
        return None

    module.set_segments(segments)
    return module
