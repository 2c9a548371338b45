"""
Property-based tests for directory scanning and the render context.
"""

import tempfile
from pathlib import Path

import allure
import pytest
from hypothesis import given, settings, strategies as st

from promptline.config import PromptConfig
from promptline.context import Context, DirContents, ScanDir, Shell


file_name = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789_-"),
    min_size=1,
    max_size=12,
)


@allure.feature("Scan Matcher")
@allure.story("Empty criteria never match")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=50)
@given(
    files=st.frozensets(file_name, max_size=5),
    extensions=st.frozensets(file_name, max_size=5),
    folders=st.frozensets(file_name, max_size=5),
)
def test_empty_criteria_never_match(files, extensions, folders):
    """A matcher with no files, extensions or folders is never a match."""
    contents = DirContents(files, extensions, folders)

    assert not ScanDir(contents).is_match()
    assert not ScanDir(contents).set_files([]).set_extensions([]).set_folders([]).is_match()


@allure.feature("Scan Matcher")
@allure.story("Any criterion matching is enough")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=50)
@given(name=file_name)
def test_any_single_criterion_matches(name: str):
    contents = DirContents(
        files=frozenset({f"{name}.txt"}),
        extensions=frozenset({"txt"}),
        folders=frozenset({name}),
    )

    assert ScanDir(contents).set_files([f"{name}.txt"]).is_match()
    assert ScanDir(contents).set_extensions(["txt"]).is_match()
    assert ScanDir(contents).set_extensions([".txt"]).is_match()
    assert ScanDir(contents).set_folders([name]).is_match()
    assert ScanDir(contents).set_files(["missing"]).set_folders([name]).is_match()
    assert not ScanDir(contents).set_files(["missing"]).set_extensions(["rs"]).is_match()


@allure.feature("Scan Matcher")
@allure.story("Directory listing")
@allure.severity(allure.severity_level.NORMAL)
def test_dir_contents_from_path(tmp_path: Path):
    (tmp_path / "pyproject.toml").write_text("")
    (tmp_path / "archive.tar.gz").write_text("")
    (tmp_path / "Makefile").write_text("")
    (tmp_path / "src").mkdir()

    contents = DirContents.from_path(tmp_path)

    assert contents.files == {"pyproject.toml", "archive.tar.gz", "Makefile"}
    assert contents.extensions == {"toml", "gz"}
    assert contents.folders == {"src"}


@allure.feature("Scan Matcher")
@allure.story("Scan failures degrade to an empty listing")
@allure.severity(allure.severity_level.NORMAL)
def test_missing_directory_gives_empty_contents(tmp_path: Path):
    contents = DirContents.from_path(tmp_path / "does-not-exist")

    assert contents == DirContents()
    assert not ScanDir(contents).set_folders(["anything"]).is_match()


@allure.feature("Render Context")
@allure.story("Directory listing is computed once")
@allure.severity(allure.severity_level.NORMAL)
def test_dir_contents_is_cached(tmp_path: Path):
    context = Context(current_dir=tmp_path, env={})
    first = context.dir_contents()

    (tmp_path / "later.py").write_text("")

    assert context.dir_contents() is first
    assert not context.try_begin_scan().set_files(["later.py"]).is_match()


@allure.feature("Render Context")
@allure.story("Module disabled state")
@allure.severity(allure.severity_level.NORMAL)
def test_builtin_disabled_state_uses_config_then_default():
    context = Context(
        current_dir=Path(tempfile.gettempdir()),
        config=PromptConfig({"directory": {"disabled": True}, "time": {"disabled": False}}),
        env={},
    )

    assert context.is_module_disabled_in_config("directory")
    assert not context.is_module_disabled_in_config("time")
    assert context.is_module_disabled_in_config("hg_branch")
    assert not context.is_module_disabled_in_config("character")
    assert context.is_module_disabled_in_config("no_such_module")


@allure.feature("Render Context")
@allure.story("Custom module disabled state")
@allure.severity(allure.severity_level.NORMAL)
def test_custom_disabled_state():
    context = Context(
        current_dir=Path(tempfile.gettempdir()),
        config=PromptConfig({"custom": {
            "on": {"command": "echo on"},
            "off": {"command": "echo off", "disabled": True},
        }}),
        env={},
    )

    assert context.is_custom_module_disabled_in_config("on") is False
    assert context.is_custom_module_disabled_in_config("off") is True
    assert context.is_custom_module_disabled_in_config("missing") is None


@allure.feature("Render Context")
@allure.story("Shell detection")
@allure.severity(allure.severity_level.MINOR)
@pytest.mark.parametrize("name,expected", [
    ("bash", Shell.BASH),
    ("/usr/bin/zsh", Shell.ZSH),
    ("fish", Shell.FISH),
    ("pwsh.exe", Shell.POWERSHELL),
    ("tcsh", Shell.UNKNOWN),
    (None, Shell.UNKNOWN),
])
def test_shell_from_name(name, expected):
    assert Shell.from_name(name) == expected


@allure.feature("Render Context")
@allure.story("Shell detection")
@allure.severity(allure.severity_level.MINOR)
def test_shell_from_environment():
    context = Context(current_dir=Path(tempfile.gettempdir()), env={"PROMPTLINE_SHELL": "zsh"})

    assert context.shell == Shell.ZSH
