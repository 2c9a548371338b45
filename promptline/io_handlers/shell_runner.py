"""
Shell command runner for promptline.
Runs custom module commands by piping them to a shell's standard input.
"""
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional

from ..constants import DEFAULT_COMMAND_SHELL, SHELL_ENV_VAR
from ..utils import is_windows

logger = logging.getLogger(__name__)

# Portable invocation tried when the selected shell cannot be launched
FALLBACK_SHELL = ["/usr/bin/env", "sh"]


@dataclass
class CommandResult:
    """Result of a shell command execution."""
    stdout: str
    stderr: str
    return_code: int
    command: str

    @property
    def success(self) -> bool:
        """Check if command succeeded."""
        return self.return_code == 0


class ShellRunner:
    """
    Executes commands through a shell.

    The shell is chosen from, in order: the explicitly configured shell,
    the shell environment variable, and the platform default. The command
    text is written to the shell's standard input; on Windows without a
    configured shell it is passed to ``cmd.exe /C`` instead.
    """

    def __init__(
        self,
        shell: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
    ) -> None:
        """
        Initialize the shell runner.

        Args:
            shell: Shell command line to use (e.g., "bash --noprofile")
            env: Environment for the child process (defaults to os.environ)
            cwd: Working directory for the child process
        """
        self._env = dict(os.environ if env is None else env)
        self._shell = shell or self._env.get(SHELL_ENV_VAR)
        self._cwd = cwd

    @property
    def shell_args(self) -> Optional[list[str]]:
        """The argument vector used to launch the shell.

        None when the configured shell line cannot be split, e.g. because of
        an unbalanced quote.
        """
        if self._shell:
            try:
                args = shlex.split(self._shell, posix=not is_windows())
            except ValueError as e:
                logger.debug(f"Cannot parse shell '{self._shell}': {e}")
                return None
            if args:
                return args
        return [DEFAULT_COMMAND_SHELL]

    def run(self, command: str) -> Optional[CommandResult]:
        """
        Run a command and capture its output.

        Args:
            command: Command text to execute

        Returns:
            CommandResult, or None if no shell could be launched
        """
        if is_windows() and not self._shell:
            return self._spawn(["cmd.exe", "/C", command], None, command)

        args = self.shell_args
        if args is not None:
            result = self._spawn(args, command, command)
            if result is not None:
                return result

        if is_windows():
            logger.debug(
                "Could not launch command with the configured shell, retrying with cmd.exe /C"
            )
            return self._spawn(["cmd.exe", "/C", command], None, command)

        logger.debug(
            f"Could not launch command with {args[0] if args else self._shell}, "
            f"retrying with {' '.join(FALLBACK_SHELL)}"
        )
        return self._spawn(FALLBACK_SHELL, command, command)

    def _spawn(
        self,
        args: list[str],
        stdin: Optional[str],
        command: str,
    ) -> Optional[CommandResult]:
        result = exec_cmd(args, stdin=stdin, env=self._env, cwd=self._cwd)
        if result is not None:
            result.command = command
        return result

    def exec_when(self, command: str) -> bool:
        """Run a gating command and report whether it exited with status 0."""
        logger.debug(f"Running '{command}'")

        result = self.run(command)
        if result is None:
            logger.debug("Cannot start command")
            return False

        if not result.success:
            _log_failure(result)
        return result.success

    def exec_command(self, command: str) -> Optional[str]:
        """Run a command and return its standard output on success.

        Standard error is only logged, never mixed into the output.
        """
        logger.debug(f"Running '{command}'")

        result = self.run(command)
        if result is None:
            return None

        if not result.success:
            _log_failure(result)
            return None
        return result.stdout


def _log_failure(result: CommandResult) -> None:
    logger.debug(f"Non-zero exit code '{result.return_code}'")
    logger.debug(f"stdout: {result.stdout}")
    logger.debug(f"stderr: {result.stderr}")


def exec_cmd(
    args: list[str],
    stdin: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
) -> Optional[CommandResult]:
    """
    Run a program directly, without a shell.

    Args:
        args: Program and arguments
        stdin: Text written to the program's standard input
        env: Environment for the child process
        cwd: Working directory

    Returns:
        CommandResult, or None if the program could not be started
    """
    try:
        result = subprocess.run(
            args,
            input=stdin if stdin is not None else "",
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot start {args[0] if args else '<empty>'}: {e}")
        return None

    return CommandResult(
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        return_code=result.returncode,
        command=" ".join(args),
    )
