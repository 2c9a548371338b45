"""
Template parser.

Grammar::

    template := (literal | variable | group)*
    variable := "$" identifier
    group    := "[" template "]" ( "(" (style | "$" identifier) ")" )?
    escape   := "\\" any-character

Identifiers are runs of letters, digits and underscores, optionally joined
by single dots (``custom.docker``). ``(`` and ``)`` are only meaningful
right after a group's closing ``]``; elsewhere they, ``[``, ``]``, ``$``
and ``\\`` must be escaped to appear literally.
"""
from typing import Optional

from ..constants import MAX_NESTING_DEPTH
from .model import (
    FormatAst,
    Group,
    Literal,
    Node,
    ParseError,
    StyleVariable,
    Variable,
    collect_variables,
)


def _is_identifier_char(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char == "_")


class FormatParser:
    """Recursive descent parser over an index cursor into the template.

    Example:
        ast = FormatParser("[$user]($style) in ").parse()
    """

    def __init__(self, template: str, max_depth: int = MAX_NESTING_DEPTH) -> None:
        self._text = template
        self._pos = 0
        self._max_depth = max_depth

    def parse(self) -> FormatAst:
        """Parse the whole template.

        Returns:
            The tuple of top-level nodes.

        Raises:
            ParseError: On unbalanced brackets or parentheses, a ``$`` without
                a name, a trailing ``\\``, or nesting deeper than max_depth.
        """
        nodes = self._parse_template(depth=0)
        if self._pos < len(self._text):
            # Only a stray closing bracket stops the top level early
            raise ParseError("Unmatched ']'", self._pos)
        return nodes

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return None

    def _parse_template(self, depth: int) -> FormatAst:
        nodes: list[Node] = []
        literal: list[str] = []

        def flush_literal() -> None:
            if literal:
                nodes.append(Literal("".join(literal)))
                literal.clear()

        while self._pos < len(self._text):
            char = self._text[self._pos]

            if char == "\\":
                if self._pos + 1 >= len(self._text):
                    raise ParseError("Unterminated escape", self._pos)
                literal.append(self._text[self._pos + 1])
                self._pos += 2
            elif char == "$":
                flush_literal()
                nodes.append(Variable(self._parse_identifier()))
            elif char == "[":
                flush_literal()
                nodes.append(self._parse_group(depth + 1))
            elif char == "]":
                break
            elif char in "()":
                raise ParseError(f"Unexpected '{char}'", self._pos)
            else:
                literal.append(char)
                self._pos += 1

        flush_literal()
        return tuple(nodes)

    def _parse_identifier(self) -> str:
        """Parse ``$name`` starting at the ``$``."""
        text = self._text
        start = self._pos
        end = start + 1

        while end < len(text) and _is_identifier_char(text[end]):
            end += 1
            # A dot only continues the name when more name characters follow
            if (end + 1 < len(text) and text[end] == "."
                    and _is_identifier_char(text[end + 1])):
                end += 1

        if end == start + 1:
            raise ParseError("Expected a variable name after '$'", start)

        self._pos = end
        return text[start + 1:end]

    def _parse_group(self, depth: int) -> Group:
        """Parse ``[content](style)`` starting at the ``[``."""
        start = self._pos
        if depth > self._max_depth:
            raise ParseError(
                f"Groups nested deeper than {self._max_depth} levels", start
            )

        self._pos += 1
        children = self._parse_template(depth)

        if self._peek() != "]":
            raise ParseError("Unclosed '['", start)
        self._pos += 1

        style = None
        if self._peek() == "(":
            style = self._parse_style()

        return Group(
            children=children,
            style=style,
            variables=tuple(collect_variables(children)),
        )

    def _parse_style(self):
        """Parse ``(style)`` starting at the ``(``."""
        start = self._pos
        self._pos += 1
        chars: list[str] = []

        while True:
            char = self._peek()
            if char is None:
                raise ParseError("Unclosed '('", start)
            if char == ")":
                self._pos += 1
                break
            if char == "(":
                raise ParseError("Unexpected '(' inside a style", self._pos)
            chars.append(char)
            self._pos += 1

        style = "".join(chars).strip()
        if style.startswith("$"):
            name = style[1:]
            if not name or not all(_is_identifier_char(c) or c == "." for c in name):
                raise ParseError(f"Invalid style variable '{style}'", start)
            return StyleVariable(name)

        return style or None


def parse(template: str) -> FormatAst:
    """Parse a template string into a Format AST."""
    return FormatParser(template).parse()
