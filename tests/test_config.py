from pathlib import Path

import pytest

from shellcore.config import ShellConfig, load_config
from shellcore.exceptions import ConfigError
from shellcore.session import Session


def test_defaults(tmp_path):
    config = load_config(cwd=tmp_path, environ={})
    assert config == ShellConfig()


def test_files_then_environment_precedence(tmp_path):
    (tmp_path / "shellcore.toml").write_text(
        'ps1 = "toml> "\nhistory_size = 10\ncolor = "blue"\n', encoding="utf-8")
    (tmp_path / "shellcore.json").write_text('{"ps2": "json> "}', encoding="utf-8")
    (tmp_path / ".env").write_text(
        "# comment\nSHELLCORE_LOG_LEVEL=info\nOTHER=ignored\n", encoding="utf-8")

    config = load_config(cwd=tmp_path, environ={"SHELLCORE_PS1": "env> ", "PS1": "nope"})

    assert config.ps1 == "env> "
    assert config.ps2 == "json> "
    assert config.log_level == "INFO"
    assert config.history_size == 10
    assert config.extra == {"COLOR": "blue"}


def test_booleans_and_paths(tmp_path):
    config = load_config(cwd=tmp_path, environ={
        "SHELLCORE_ENABLE_COMPLETION": "off",
        "SHELLCORE_LOG_FILE_PATH": str(tmp_path / "logs" / "shell.log"),
    })
    assert config.enable_completion is False
    assert config.log_file_path == (tmp_path / "logs" / "shell.log").resolve()


@pytest.mark.parametrize(
    "key, value",
    [
        ("SHELLCORE_LOG_LEVEL", "LOUD"),
        ("SHELLCORE_HISTORY_SIZE", "0"),
        ("SHELLCORE_HISTORY_SIZE", "many"),
        ("SHELLCORE_ENABLE_COMPLETION", "maybe"),
    ],
)
def test_invalid_values_raise(tmp_path, key, value):
    with pytest.raises(ConfigError):
        load_config(cwd=tmp_path, environ={key: value})


def test_malformed_json_raises(tmp_path):
    (tmp_path / "shellcore.json").write_text("{nope", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(cwd=tmp_path, environ={})


def test_session_from_config_uses_prompts():
    session = Session.from_config(ShellConfig(ps1="[%(user)s] ", ps2=".. "), env={"user": "ann"})
    assert session.prompt("ps1") == "[ann] "
    assert session.prompt("ps2") == ".. "


def test_prompt_with_missing_variable_falls_back_to_template():
    session = Session(env={"ps1": "%(missing)s> "})
    assert session.prompt("ps1") == "%(missing)s> "
