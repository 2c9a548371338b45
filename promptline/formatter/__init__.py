"""
Prompt template language.

Provides the parser, the AST it produces, and the evaluator that turns an
AST plus variable bindings into styled segments.
"""

from .model import (
    FormatAst,
    Group,
    Literal,
    Meta,
    ParseError,
    StyleVariable,
    Variable,
)
from .parser import FormatParser, parse
from .evaluator import evaluate, render, should_show_group
from .string_formatter import StringFormatter

__all__ = [
    "FormatAst",
    "Group",
    "Literal",
    "Meta",
    "ParseError",
    "StyleVariable",
    "Variable",
    "FormatParser",
    "parse",
    "evaluate",
    "render",
    "should_show_group",
    "StringFormatter",
]
