"""
Line break module.
"""
from typing import Optional

from ..config import ModuleConfig
from ..context import Context
from ..module import Module

DESCRIPTION = "Separates the prompt into two lines"

LineBreakConfig = ModuleConfig


def module(context: Context) -> Optional[Module]:
    module = context.new_module("line_break")
    module.create_segment("line_break", "\n")
    return module
