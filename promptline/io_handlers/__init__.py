"""
I/O handlers for promptline.
"""
from .shell_runner import CommandResult, ShellRunner, exec_cmd

__all__ = ['CommandResult', 'ShellRunner', 'exec_cmd']
