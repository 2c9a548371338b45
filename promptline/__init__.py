"""
promptline - A fast, configurable prompt for any shell.
"""
from .constants import APP_NAME, APP_VERSION, APP_DESCRIPTION
from .render import explain, get_module, get_prompt

__version__ = APP_VERSION
__all__ = ['APP_NAME', 'APP_VERSION', 'APP_DESCRIPTION', 'explain', 'get_module', 'get_prompt']
