"""
Template evaluator.

Walks a Format AST depth first and turns it into a flat list of Segments,
looking variables up in a binding table. A group whose variables all
evaluate to empty is dropped together with its literals and style.
"""
import logging
from typing import Mapping, Optional, Union

from rich.style import Style

from ..segment import Segment
from ..style import parse_style
from .model import FormatAst, Group, Literal, Meta, StyleVariable, Variable

logger = logging.getLogger(__name__)

VariableValue = Union[list[Segment], str, Meta, None]
StyleValue = Union[str, Style, None]


def evaluate(
    nodes: FormatAst,
    bindings: Mapping[str, VariableValue],
    style_bindings: Optional[Mapping[str, StyleValue]] = None,
    style: Optional[Style] = None,
) -> list[Segment]:
    """Evaluate parsed nodes into segments.

    Args:
        nodes: The Format AST to evaluate.
        bindings: Variable name to segments, plain text or a Meta template.
            Missing names evaluate to nothing.
        style_bindings: Style variable name to a style string or Style.
        style: The style inherited from the enclosing group.

    Returns:
        The rendered segments in template order.
    """
    style_bindings = style_bindings or {}
    segments: list[Segment] = []

    for node in nodes:
        if isinstance(node, Literal):
            segments.append(Segment("_text", node.text, style))
        elif isinstance(node, Variable):
            segments.extend(_evaluate_variable(node.name, bindings, style_bindings, style))
        elif isinstance(node, Group):
            if not should_show_group(node, bindings):
                continue
            group_style = _resolve_style(node.style, style_bindings) or style
            segments.extend(evaluate(node.children, bindings, style_bindings, group_style))

    return segments


def render(
    nodes: FormatAst,
    bindings: Mapping[str, VariableValue],
    style_bindings: Optional[Mapping[str, StyleValue]] = None,
) -> str:
    """Evaluate nodes and join the segments into an ANSI-styled string."""
    return "".join(
        segment.ansi_string() for segment in evaluate(nodes, bindings, style_bindings)
    )


def should_show_group(group: Group, bindings: Mapping[str, VariableValue]) -> bool:
    """Whether a group survives evaluation.

    A group without variables always shows. Otherwise at least one of the
    variables it references must produce non-empty content.
    """
    if not group.variables:
        return True
    return any(_has_content(name, bindings) for name in group.variables)


def _has_content(name: str, bindings: Mapping[str, VariableValue]) -> bool:
    value = bindings.get(name)
    if value is None:
        return False
    if isinstance(value, Meta):
        # Only the variables inside a meta template decide its visibility
        inner = _without_meta(bindings)
        return any(
            _has_content(var, inner)
            for var in _meta_variables(value.nodes)
        )
    if isinstance(value, str):
        return bool(value)
    return any(segment.value for segment in value)


def _meta_variables(nodes: FormatAst) -> list[str]:
    names = []
    for node in nodes:
        if isinstance(node, Variable):
            names.append(node.name)
        elif isinstance(node, Group):
            names.extend(node.variables)
    return names


def _without_meta(bindings: Mapping[str, VariableValue]) -> dict[str, VariableValue]:
    return {k: v for k, v in bindings.items() if not isinstance(v, Meta)}


def _evaluate_variable(
    name: str,
    bindings: Mapping[str, VariableValue],
    style_bindings: Mapping[str, StyleValue],
    style: Optional[Style],
) -> list[Segment]:
    value = bindings.get(name)

    if value is None:
        return []
    if isinstance(value, Meta):
        return evaluate(value.nodes, _without_meta(bindings), style_bindings, style)
    if isinstance(value, str):
        return [Segment(name, value, style)] if value else []

    # Segments keep their own style; unstyled ones take the enclosing style
    return [
        segment if segment.has_style() or style is None else segment.with_style(style)
        for segment in value
    ]


def _resolve_style(
    style_ref: Union[str, StyleVariable, None],
    style_bindings: Mapping[str, StyleValue],
) -> Optional[Style]:
    if style_ref is None:
        return None
    if isinstance(style_ref, StyleVariable):
        value = style_bindings.get(style_ref.name)
        if value is None:
            logger.debug(f"Style variable '${style_ref.name}' is not set")
            return None
        if isinstance(value, Style):
            return value
        return parse_style(value)
    return parse_style(style_ref)
