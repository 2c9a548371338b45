"""
Prompt rendering.

Parses the root `format`, resolves its variables to module output and
joins everything into the string the shell displays.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .constants import FALLBACK_PROMPT
from .context import Context, Shell
from .formatter import ParseError, StringFormatter
from .messages import DEPRECATED_USE_FORMAT, MessageState
from .module import Module
from .resolver import compute_modules, handle_module, resolve_variables

logger = logging.getLogger(__name__)

# Clears to the end of the screen; works around a fish redraw bug
FISH_CLEAR_SEQUENCE = "\x1b[J"

# Modules left out of `explain`
EXPLAIN_SKIP = frozenset({"character"})


def get_prompt(context: Context, messages: Optional[MessageState] = None) -> str:
    """Render the full prompt.

    Args:
        context: The render context.
        messages: Message state to draw one-time messages from. Shown
            messages are marked viewed; the caller persists the state.

    Returns:
        The prompt, with escape sequences wrapped for the context's shell.
        A malformed `format` gives a single ``>``.
    """
    config = context.config.get_root_config()
    buf = ""

    # Only fish needs this; other shells redraw badly with it
    if context.shell == Shell.FISH:
        buf += FISH_CLEAR_SEQUENCE

    try:
        formatter = StringFormatter(config.format)
    except ParseError as e:
        logger.error(f"Error parsing `format`: {e}")
        return buf + FALLBACK_PROMPT

    bindings = resolve_variables(formatter.get_variables(), context)
    formatter.map_variables_to_segments(bindings.get)

    segments = []
    if messages is not None:
        if context.config.has_legacy_keys():
            messages.add(DEPRECATED_USE_FORMAT)
        segments.extend(messages.get_segments())
        messages.mark_viewed()
    segments.extend(formatter.parse())

    root_module = Module("promptline_root", "The root module")
    root_module.set_segments(segments)

    return buf + "".join(root_module.ansi_strings_for_shell(context.shell.value))


def get_module(module_name: str, context: Context) -> Optional[str]:
    """Render a single module (e.g., "git_branch" or "custom.docker")."""
    resolved = handle_module(module_name, context, [module_name])
    if not resolved:
        return None
    return "".join(str(module) for module in resolved)


def explain(context: Context, console: Optional[Console] = None) -> None:
    """Print each visible module next to its description."""
    console = console or Console()
    config = context.config.get_root_config()

    try:
        variables = StringFormatter(config.format).get_variables()
    except ParseError as e:
        logger.error(f"Error parsing `format`: {e}")
        return

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("module", no_wrap=True)
    table.add_column("description", overflow="fold")

    for module in compute_modules(variables, context):
        if module.name in EXPLAIN_SKIP:
            continue
        value = "".join(segment.ansi_string() for segment in module.segments)
        table.add_row(Text.from_ansi(value.strip("\n")), f"-  {module.description}")

    console.print("\n Here's a breakdown of your prompt:")
    console.print(table)
