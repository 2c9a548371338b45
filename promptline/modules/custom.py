"""
Custom modules - user-defined prompt components driven by shell commands.

The configuration sets the files, extensions and directories needed for the
module to be displayed. If none of them match, an optional `when` command
can be run; if it exits with status 0 the module is shown. The text of the
module itself is the output of `command`.
"""
import logging
from typing import Optional

from ..config import CustomModuleConfig
from ..context import Context
from ..io_handlers.shell_runner import ShellRunner
from ..module import Module
from ..style import parse_style

logger = logging.getLogger(__name__)


def handle(name: str, context: Context) -> Optional[Module]:
    """Evaluate a custom module, logging any error instead of raising it."""
    try:
        return module(name, context)
    except Exception as e:
        logger.warning(f"Error in module `custom.{name}`: {e}")
        return None


def _names(values: list) -> list[str]:
    names = [value for value in values if isinstance(value, str)]
    if len(names) != len(values):
        logger.debug(f"Ignoring non-string entries in {values}")
    return names


def module(name: str, context: Context) -> Optional[Module]:
    """Evaluate the custom module configured under `name`.

    Args:
        name: Key of the module in the `custom` configuration table.
        context: The render context.

    Returns:
        The module, or None when it is not configured, does not match, its
        command fails, or its trimmed output is empty.
    """
    table = context.config.get_custom_module_config(name)
    if table is None:
        logger.debug(f"No configuration for custom module '{name}'")
        return None
    config = CustomModuleConfig.load(table)

    runner = ShellRunner(
        shell=config.shell,
        env=context.env,
        cwd=str(context.current_dir),
    )

    is_match = (
        context.try_begin_scan()
        .set_files(_names(config.files))
        .set_extensions(_names(config.extensions))
        .set_folders(_names(config.directories))
        .is_match()
    )

    if not is_match:
        if config.when is not None:
            is_match = runner.exec_when(config.when)
        if not is_match:
            return None

    module = Module(f"custom.{name}", config.description, table)

    if config.prefix is not None:
        module.set_prefix(config.prefix)
    if config.suffix is not None:
        module.set_suffix(config.suffix)

    # Only the output carries `style`
    if config.symbol is not None:
        module.create_segment("symbol", config.symbol)

    output = runner.exec_command(config.command)
    if output is None:
        return None

    trimmed = output.strip()
    if not trimmed:
        # An empty module would only leave stray separators behind
        return None

    module.create_segment("output", trimmed, parse_style(config.style))
    return module
