"""
Module resolution.

Maps the variables of the root template to modules: builtins, the `custom`
wildcard, explicitly placed `custom.<name>` modules, and the synthetic
`all` variable that expands to the default module order. Independent
variables are resolved on a thread pool; results always keep template
order.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Union

from . import modules
from .constants import LINE_BREAK_SENTINEL, PROMPT_ORDER
from .context import Context
from .module import Module
from .modules import custom
from .segment import Segment
from .utils import ordered_map

logger = logging.getLogger(__name__)

ALL_VARIABLE = "all"
CUSTOM_VARIABLE = "custom"
CUSTOM_PREFIX = "custom."


@dataclass(frozen=True)
class Builtin:
    name: str


@dataclass(frozen=True)
class CustomWildcard:
    pass


@dataclass(frozen=True)
class CustomNamed:
    name: str


@dataclass(frozen=True)
class Unknown:
    name: str


VariableKind = Union[Builtin, CustomWildcard, CustomNamed, Unknown]


def classify(variable: str) -> VariableKind:
    """Classify a template variable name.

    Example:
        >>> classify("custom.docker")
        CustomNamed(name='docker')
    """
    if variable in modules.BUILTIN_MODULES:
        return Builtin(variable)
    if variable == CUSTOM_VARIABLE:
        return CustomWildcard()
    if variable.startswith(CUSTOM_PREFIX) and len(variable) > len(CUSTOM_PREFIX):
        return CustomNamed(variable[len(CUSTOM_PREFIX):])
    return Unknown(variable)


def handle_module(
    variable: str,
    context: Context,
    requested_variables: Sequence[str],
) -> list[Module]:
    """Resolve one template variable to zero or more modules.

    Args:
        variable: The variable name from the template.
        context: The render context.
        requested_variables: Every variable of the root template, used to
            keep explicitly placed custom modules out of the wildcard.

    Returns:
        The modules that produced output, in configuration order.
    """
    kind = classify(variable)

    if isinstance(kind, Builtin):
        if context.is_module_disabled_in_config(kind.name):
            return []
        module = modules.handle(kind.name, context)
        return [module] if module is not None else []

    if isinstance(kind, CustomWildcard):
        custom_modules = context.config.get_custom_modules() or {}
        names = [
            name for name, table in custom_modules.items()
            if should_add_implicit_custom_module(name, table, requested_variables)
        ]
        results = ordered_map(lambda name: custom.handle(name, context), names)
        return [module for module in results if module is not None]

    if isinstance(kind, CustomNamed):
        disabled = context.is_custom_module_disabled_in_config(kind.name)
        if disabled is None:
            configured = list(context.config.get_custom_modules() or {})
            if configured:
                logger.debug(
                    f"Format contains custom module \"{variable}\", but no configuration "
                    f"was provided. Configuration for the following modules were "
                    f"provided: {configured}"
                )
            else:
                logger.debug(
                    f"Format contains custom module \"{variable}\", but no configuration "
                    f"was provided."
                )
            return []
        if disabled:
            return []
        module = custom.handle(kind.name, context)
        return [module] if module is not None else []

    logger.debug(
        f"Expected format to contain value from {list(modules.ALL_MODULES)}. "
        f"Instead received {variable}"
    )
    return []


def should_add_implicit_custom_module(
    name: str,
    table: Mapping[str, Any],
    requested_variables: Iterable[str],
) -> bool:
    """Whether the `custom` wildcard should render this custom module.

    Modules placed explicitly as `$custom.<name>` and disabled modules are
    left out.
    """
    if f"{CUSTOM_PREFIX}{name}" in requested_variables:
        return False
    return table.get("disabled") is not True


def module_segments(resolved: Iterable[Module]) -> list[Segment]:
    """Flatten modules into their segments, including prefix and suffix."""
    return [segment for module in resolved for segment in module.all_segments()]


def resolve_all(context: Context, requested_variables: Sequence[str]) -> list[Segment]:
    """Resolve the default module order used by `$all`."""

    def resolve_entry(entry: str) -> list[Segment]:
        if entry == LINE_BREAK_SENTINEL:
            return [Segment("line_break", "\n")]
        return module_segments(handle_module(entry, context, requested_variables))

    return [
        segment
        for segments in ordered_map(resolve_entry, PROMPT_ORDER)
        for segment in segments
    ]


def resolve_variables(
    variables: Sequence[str],
    context: Context,
) -> dict[str, list[Segment]]:
    """Resolve every variable of the root template.

    Args:
        variables: Variable names in template order.
        context: The render context.

    Returns:
        Variable name to segments. Variables that resolve to nothing map to
        an empty list.
    """

    def resolve(variable: str) -> list[Segment]:
        if variable == ALL_VARIABLE:
            return resolve_all(context, variables)
        return module_segments(handle_module(variable, context, variables))

    return dict(zip(variables, ordered_map(resolve, variables)))


def compute_modules(variables: Sequence[str], context: Context) -> list[Module]:
    """Resolve variables to modules in template order, expanding `$all`."""
    names: list[str] = []
    for variable in variables:
        if variable == ALL_VARIABLE:
            names.extend(e for e in PROMPT_ORDER if e != LINE_BREAK_SENTINEL)
        else:
            names.append(variable)

    resolved = ordered_map(lambda name: handle_module(name, context, variables), names)
    return [module for group in resolved for module in group]
