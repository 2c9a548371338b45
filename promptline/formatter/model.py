"""
Format AST for prompt templates.

A template such as ``on [$symbol$branch]($style) `` parses into a tuple of
nodes: literals, variables, and groups with an optional style.
"""
from dataclasses import dataclass
from typing import Optional, Union


class ParseError(Exception):
    """Raised when a template string cannot be parsed."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position

        if position is not None:
            full_message = f"{message} (position {position})"
        else:
            full_message = message

        super().__init__(full_message)


@dataclass(frozen=True)
class Literal:
    """Text copied verbatim to the output."""
    text: str


@dataclass(frozen=True)
class Variable:
    """A ``$name`` reference resolved at evaluation time."""
    name: str


@dataclass(frozen=True)
class StyleVariable:
    """A ``$name`` reference in a group's style position."""
    name: str


@dataclass(frozen=True)
class Group:
    """A ``[content](style)`` span.

    Attributes:
        children: Nodes of the nested template
        style: A literal style string, a StyleVariable, or None when the
            group has no ``(...)`` part
        variables: Names of every variable referenced inside the group,
            including nested groups. The group is dropped when all of
            them evaluate to empty.
    """
    children: tuple["Node", ...]
    style: Union[str, StyleVariable, None] = None
    variables: tuple[str, ...] = ()


Node = Union[Literal, Variable, Group]
FormatAst = tuple[Node, ...]


@dataclass(frozen=True)
class Meta:
    """A variable value that is itself a template (e.g., a styled symbol)."""
    nodes: FormatAst


def collect_variables(nodes: FormatAst) -> list[str]:
    """Collect variable names in order of first occurrence, depth first."""
    names: list[str] = []
    for node in nodes:
        if isinstance(node, Variable):
            if node.name not in names:
                names.append(node.name)
        elif isinstance(node, Group):
            for name in node.variables:
                if name not in names:
                    names.append(name)
    return names


def collect_style_variables(nodes: FormatAst) -> list[str]:
    """Collect style variable names in order of first occurrence."""
    names: list[str] = []
    for node in nodes:
        if isinstance(node, Group):
            if isinstance(node.style, StyleVariable) and node.style.name not in names:
                names.append(node.style.name)
            for name in collect_style_variables(node.children):
                if name not in names:
                    names.append(name)
    return names
