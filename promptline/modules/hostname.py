"""
Hostname module.
"""
import logging
import socket
from dataclasses import dataclass
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..formatter import ParseError, StringFormatter
from ..module import Module

logger = logging.getLogger(__name__)

DESCRIPTION = "The system hostname"


@dataclass
class HostnameConfig(ModuleConfig):
    ssh_only: bool = True
    trim_at: str = "."
    format: str = "[$hostname]($style) in "
    style: str = "bold dimmed green"


def module(context: Context) -> Optional[Module]:
    module = context.new_module("hostname")
    config = HostnameConfig.load(module.config)

    if config.ssh_only and not context.get_env("SSH_CONNECTION"):
        return None

    hostname = socket.gethostname()
    if config.trim_at:
        hostname = hostname.split(config.trim_at, 1)[0]
    if not hostname:
        return None

    try:
        segments = (
            StringFormatter(config.format)
            .map_style(lambda var: config.style if var == "style" else None)
            .map(lambda var: hostname if var == "hostname" else None)
            .parse()
        )
    except ParseError as e:
        logger.warning(f"Error in module `hostname`:\n{e}")
        return None

    module.set_segments(segments)
    return module
