"""
Property-based tests for configuration loading and validation.
"""

import json
from dataclasses import dataclass

import allure
import pytest
from hypothesis import given, settings, strategies as st

from promptline.config import (
    ConfigError,
    CustomModuleConfig,
    ModuleConfig,
    PromptConfig,
    get_config_path,
    import_config,
    load_config,
    validate_config,
)
from promptline.constants import CONFIG_FILE, DEFAULT_FORMAT, DEFAULT_SCAN_TIMEOUT_MS


@dataclass
class SampleConfig(ModuleConfig):
    format: str = "$value"
    threshold: int = 1
    names: list = None


@st.composite
def custom_module_strategy(draw):
    """Generate valid custom module tables."""
    table = {"command": draw(st.text(max_size=30))}
    for key in ("when", "symbol", "style", "prefix", "suffix", "description"):
        if draw(st.booleans()):
            table[key] = draw(st.text(max_size=10))
    for key in ("files", "extensions", "directories"):
        if draw(st.booleans()):
            table[key] = draw(st.lists(st.text(min_size=1, max_size=10), max_size=3))
    return table


@st.composite
def config_strategy(draw):
    """Generate valid configuration dictionaries."""
    data = {}
    if draw(st.booleans()):
        data["format"] = draw(st.text(max_size=30))
    if draw(st.booleans()):
        data["scan_timeout"] = draw(st.integers(min_value=0, max_value=10_000))
    names = draw(st.lists(
        st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=10),
        max_size=4,
        unique=True,
    ))
    if names:
        data["custom"] = {name: draw(custom_module_strategy()) for name in names}
    if draw(st.booleans()):
        data["directory"] = {"disabled": draw(st.booleans())}
    return data


@allure.feature("Configuration")
@allure.story("Valid configurations load unchanged")
@allure.severity(allure.severity_level.CRITICAL)
@settings(max_examples=100)
@given(data=config_strategy())
def test_valid_config_imports(data):
    is_valid, errors = validate_config(data)
    assert is_valid, errors

    config = import_config(json.dumps(data))
    root = config.get_root_config()

    assert root.format == data.get("format", DEFAULT_FORMAT)
    assert root.scan_timeout == data.get("scan_timeout", DEFAULT_SCAN_TIMEOUT_MS)
    assert list(config.get_custom_modules() or {}) == list(data.get("custom", {}))


@allure.feature("Configuration")
@allure.story("Malformed JSON reports line and column")
@allure.severity(allure.severity_level.NORMAL)
def test_import_malformed_json_reports_line_column():
    with pytest.raises(ConfigError) as exc_info:
        import_config('{\n  "format": oops\n}')

    assert exc_info.value.line == 2
    assert exc_info.value.column is not None
    assert "(line 2, column" in str(exc_info.value)


@allure.feature("Configuration")
@allure.story("Validation rejects invalid types")
@allure.severity(allure.severity_level.NORMAL)
def test_validate_config_rejects_invalid_types():
    is_valid, errors = validate_config({
        "format": 1,
        "scan_timeout": -5,
        "custom": {"a": {"command": 3, "files": "x"}, "b": "nope"},
        "directory": {"disabled": "yes"},
        "python": 7,
    })

    assert not is_valid
    assert len(errors) == 7


@allure.feature("Configuration")
@allure.story("Validation rejects invalid types")
@allure.severity(allure.severity_level.NORMAL)
def test_validate_config_rejects_non_string_scan_entries():
    is_valid, errors = validate_config({
        "custom": {"foo": {"command": "echo hi", "extensions": [1], "files": [["x"]], "directories": ["ok"]}},
    })

    assert not is_valid
    assert errors == [
        "Custom module 'foo.files' must contain only strings",
        "Custom module 'foo.extensions' must contain only strings",
    ]


@allure.feature("Configuration")
@allure.story("Unknown root keys are ignored")
@allure.severity(allure.severity_level.NORMAL)
def test_unknown_non_object_root_keys_are_ignored():
    data = {"$schema": "https://example.invalid/promptline.json", "format": "$character"}

    assert validate_config(data) == (True, [])
    assert import_config(json.dumps(data)).get_root_config().format == "$character"
    assert validate_config({"character": "x"})[0] is False


@allure.feature("Configuration")
@allure.story("Validation rejects invalid types")
@allure.severity(allure.severity_level.MINOR)
def test_validate_config_rejects_non_object():
    assert validate_config([1, 2]) == (False, ["Configuration must be an object"])


@allure.feature("Configuration")
@allure.story("Loading falls back to defaults")
@allure.severity(allure.severity_level.CRITICAL)
def test_load_config_missing_and_broken_files(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{")

    for path in (tmp_path / "missing.json", broken):
        root = load_config(path).get_root_config()
        assert root.format == DEFAULT_FORMAT
        assert root.scan_timeout == DEFAULT_SCAN_TIMEOUT_MS


@allure.feature("Configuration")
@allure.story("Loading reads the file")
@allure.severity(allure.severity_level.NORMAL)
def test_load_config_reads_file(tmp_path):
    path = tmp_path / "promptline.json"
    path.write_text(json.dumps({"format": "$character", "character": {"success_symbol": ">"}}))

    config = load_config(path)

    assert config.get_root_config().format == "$character"
    assert config.get_module_config("character") == {"success_symbol": ">"}


@allure.feature("Configuration")
@allure.story("Config path resolution")
@allure.severity(allure.severity_level.MINOR)
def test_get_config_path(tmp_path):
    override = tmp_path / "custom.json"

    assert get_config_path({"PROMPTLINE_CONFIG": str(override)}) == override
    assert get_config_path({}) == CONFIG_FILE


@allure.feature("Configuration")
@allure.story("Module tables")
@allure.severity(allure.severity_level.NORMAL)
def test_root_keys_are_not_module_tables():
    config = PromptConfig({"format": "x", "custom": {}, "directory": {"disabled": True}, "time": 3})

    assert config.get_module_config("format") is None
    assert config.get_module_config("custom") is None
    assert config.get_module_config("time") is None
    assert config.get_module_config("directory") == {"disabled": True}


@allure.feature("Configuration")
@allure.story("Legacy keys")
@allure.severity(allure.severity_level.MINOR)
def test_has_legacy_keys():
    assert PromptConfig({"add_newline": False}).has_legacy_keys()
    assert not PromptConfig({"format": "x"}).has_legacy_keys()


@allure.feature("Configuration")
@allure.story("Root values of the wrong type keep defaults")
@allure.severity(allure.severity_level.NORMAL)
def test_root_config_wrong_types():
    root = PromptConfig({"format": 5, "scan_timeout": True}).get_root_config()

    assert root.format == DEFAULT_FORMAT
    assert root.scan_timeout == DEFAULT_SCAN_TIMEOUT_MS


@allure.feature("Configuration")
@allure.story("Module config dataclasses")
@allure.severity(allure.severity_level.NORMAL)
def test_module_config_load_overrides_and_ignores():
    config = SampleConfig.load({
        "format": "[$value]",
        "threshold": "three",
        "unknown": 1,
        "disabled": True,
        "names": ["a"],
    })

    assert config.format == "[$value]"
    assert config.threshold == 1
    assert config.disabled is True
    assert config.names == ["a"]
    assert not hasattr(config, "unknown")


@allure.feature("Configuration")
@allure.story("Module config dataclasses")
@allure.severity(allure.severity_level.MINOR)
def test_bool_is_not_accepted_as_int():
    assert SampleConfig.load({"threshold": True}).threshold == 1
    assert SampleConfig.load({"disabled": 1}).disabled is False


@allure.feature("Configuration")
@allure.story("Custom module defaults")
@allure.severity(allure.severity_level.MINOR)
def test_custom_module_defaults():
    config = CustomModuleConfig.load({"command": "echo x"})

    assert config.command == "echo x"
    assert config.when is None and config.shell is None
    assert config.files == [] and config.extensions == [] and config.directories == []
    assert config.style == "bold green"
    assert config.description == "<custom module>"
