"""
StringFormatter - binds values to a parsed template and evaluates it.
"""
import logging
from typing import Callable, Optional

from rich.style import Style

from ..segment import Segment
from .evaluator import StyleValue, VariableValue, evaluate
from .model import (
    FormatAst,
    Meta,
    ParseError,
    collect_style_variables,
    collect_variables,
)
from .parser import FormatParser

logger = logging.getLogger(__name__)


class StringFormatter:
    """Parses a template once and lets callers bind its variables.

    Each ``map*`` method only fills variables that are still unbound, so
    mappers can be chained from most to least specific.

    Example:
        segments = (
            StringFormatter("on [$symbol$branch]($style) ")
            .map_meta(lambda var: "🌱 " if var == "symbol" else None)
            .map_style(lambda var: "bold purple" if var == "style" else None)
            .map(lambda var: "main" if var == "branch" else None)
            .parse()
        )
    """

    def __init__(self, template: str) -> None:
        """
        Initialize the formatter.

        Args:
            template: The template string to parse.

        Raises:
            ParseError: If the template is malformed.
        """
        self._ast: FormatAst = FormatParser(template).parse()
        self._variables: dict[str, VariableValue] = {
            name: None for name in collect_variables(self._ast)
        }
        self._style_variables: dict[str, StyleValue] = {
            name: None for name in collect_style_variables(self._ast)
        }

    @property
    def ast(self) -> FormatAst:
        return self._ast

    def get_variables(self) -> list[str]:
        """Get variable names in order of first appearance."""
        return list(self._variables)

    def get_style_variables(self) -> list[str]:
        return list(self._style_variables)

    def map(self, mapper: Callable[[str], Optional[str]]) -> "StringFormatter":
        """Bind plain text values."""
        for name, value in self._variables.items():
            if value is None:
                self._variables[name] = mapper(name)
        return self

    def map_meta(self, mapper: Callable[[str], Optional[str]]) -> "StringFormatter":
        """Bind values that are templates themselves (e.g., styled symbols).

        A meta value that fails to parse is logged and left unbound.
        """
        for name, value in self._variables.items():
            if value is not None:
                continue
            template = mapper(name)
            if template is None:
                continue
            try:
                self._variables[name] = Meta(FormatParser(template).parse())
            except ParseError as e:
                logger.warning(f"Error parsing meta variable '${name}': {e}")
        return self

    def map_style(
        self,
        mapper: Callable[[str], Optional[StyleValue]],
    ) -> "StringFormatter":
        """Bind style variables."""
        for name, value in self._style_variables.items():
            if value is None:
                self._style_variables[name] = mapper(name)
        return self

    def map_variables_to_segments(
        self,
        mapper: Callable[[str], Optional[list[Segment]]],
    ) -> "StringFormatter":
        """Bind variables to pre-rendered segments (e.g., module output)."""
        for name, value in self._variables.items():
            if value is None:
                self._variables[name] = mapper(name)
        return self

    def parse(self, default_style: Optional[Style] = None) -> list[Segment]:
        """Evaluate the template with the current bindings."""
        return evaluate(self._ast, self._variables, self._style_variables, default_style)
