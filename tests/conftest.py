"""
Shared fixtures for promptline tests.
"""
import os
from pathlib import Path
from typing import Any, Optional

import pytest

from promptline.config import PromptConfig
from promptline.context import Context, Shell
from promptline.modules import ALL_MODULES


def minimal_env() -> dict[str, str]:
    """Enough environment to find `sh`, and nothing that makes a module show."""
    return {"PATH": os.environ.get("PATH", os.defpath)}


@pytest.fixture
def builtins_off() -> dict[str, Any]:
    """Config tables disabling every builtin module."""
    return {name: {"disabled": True} for name in ALL_MODULES}


@pytest.fixture
def make_context(tmp_path: Path):
    """Factory for contexts rooted in an empty temporary directory."""

    def _make(
        config: Optional[dict[str, Any]] = None,
        shell: Shell = Shell.UNKNOWN,
        env: Optional[dict[str, str]] = None,
        properties: Optional[dict[str, str]] = None,
        current_dir: Optional[Path] = None,
    ) -> Context:
        return Context(
            current_dir=current_dir or tmp_path,
            config=PromptConfig(config or {}),
            shell=shell,
            env=minimal_env() if env is None else env,
            properties=properties,
        )

    return _make
