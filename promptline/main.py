"""
Main entry point for promptline.
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .constants import APP_NAME, APP_VERSION, APP_DESCRIPTION, LOG_ENV_VAR
from .config import get_config_path, load_config
from .context import Context, Shell


LOG_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_log_level(env: Optional[dict] = None) -> int:
    """Get the log level named by the log environment variable (default warn)."""
    env = os.environ if env is None else env
    value = env.get(LOG_ENV_VAR, "").strip().lower()
    return LOG_LEVELS.get(value, logging.WARNING)


def setup_logging(level: Optional[int] = None) -> None:
    """Send log records to stderr so they never end up inside the prompt."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    root = logging.getLogger(APP_NAME)
    root.handlers[:] = [handler]
    root.setLevel(get_log_level() if level is None else level)
    root.propagate = False


def _add_context_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-s", "--status",
        type=str,
        help="Exit status of the previous command"
    )

    parser.add_argument(
        "-d", "--cmd-duration",
        type=str,
        help="Duration of the previous command in milliseconds"
    )

    parser.add_argument(
        "-j", "--jobs",
        type=str,
        help="Number of background jobs"
    )

    parser.add_argument(
        "-p", "--path",
        type=str,
        help="Directory to render the prompt for (default: current directory)"
    )

    parser.add_argument(
        "--shell",
        type=str,
        help="Shell to render escape sequences for (bash, zsh, fish, ...)"
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=APP_DESCRIPTION
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to config file"
    )

    subparsers = parser.add_subparsers(dest="command")

    prompt_parser = subparsers.add_parser("prompt", help="Print the full prompt")
    _add_context_arguments(prompt_parser)

    module_parser = subparsers.add_parser("module", help="Print a single module")
    module_parser.add_argument("name", help="Module name, e.g. git_branch or custom.docker")
    _add_context_arguments(module_parser)

    explain_parser = subparsers.add_parser("explain", help="Explain the modules in the prompt")
    _add_context_arguments(explain_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(argv)
    if args.command is None:
        # Only global options were given; default to `prompt`
        args = parser.parse_args([*argv, "prompt"])
    return args


def build_context(args: argparse.Namespace) -> Context:
    """Create the render context from parsed arguments."""
    config_path = Path(args.config).expanduser() if args.config else get_config_path()
    config = load_config(config_path)

    properties = {}
    for key in ("status", "cmd_duration", "jobs"):
        value = getattr(args, key, None)
        if value is not None:
            properties[key] = value

    shell = Shell.from_name(args.shell) if args.shell else None

    return Context(
        current_dir=Path(args.path) if args.path else None,
        config=config,
        shell=shell,
        properties=properties,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    setup_logging()
    args = parse_args(argv)
    context = build_context(args)

    from .render import explain, get_module, get_prompt

    if args.command == "module":
        output = get_module(args.name, context)
        if output is not None:
            print(output)
        return 0

    if args.command == "explain":
        explain(context)
        return 0

    from .messages import MessageStore
    store = MessageStore()
    messages = store.load()
    seen_before = len(messages.viewed)

    sys.stdout.write(get_prompt(context, messages))
    sys.stdout.flush()

    if len(messages.viewed) != seen_before:
        store.save(messages)
    return 0


if __name__ == "__main__":
    sys.exit(main())
