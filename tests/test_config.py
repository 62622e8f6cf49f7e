import json

import pytest

from assertsupport.config import (
    ConfigManager,
    DictProvider,
    EnvProvider,
    FileProvider,
    SupportSettings,
    load_config,
    load_settings,
)


def test_defaults():
    s = load_settings(environ={})
    assert s == SupportSettings()
    assert s.diff_context_lines == 3
    assert s.log_level == "warning"


def test_env_overrides():
    env = {
        "ASSERTSUPPORT_DIFF__COLOR": "true",
        "ASSERTSUPPORT_DIFF__CONTEXT_LINES": "5",
        "ASSERTSUPPORT_LOG__LEVEL": "debug",
        "UNRELATED": "1",
    }
    s = load_settings(environ=env)
    assert s.diff_color is True
    assert s.diff_context_lines == 5
    assert s.log_level == "debug"


def test_file_then_env(tmp_path):
    path = tmp_path / "assertsupport.json"
    path.write_text(json.dumps({"diff": {"color": True, "context_lines": 1}, "log": {"json": True}}))

    s = load_settings(str(path), environ={"ASSERTSUPPORT_DIFF__CONTEXT_LINES": "7"})
    assert s.diff_color is True
    assert s.diff_context_lines == 7
    assert s.log_json is True


def test_config_path_from_env(tmp_path):
    path = tmp_path / "assertsupport.toml"
    path.write_text('[diff]\ncontext_lines = 0\n\n[log]\nlevel = "info"\n')
    pytest.importorskip("tomllib")

    s = load_settings(environ={"ASSERTSUPPORT_CONFIG": str(path)})
    assert s.diff_context_lines == 0
    assert s.log_level == "info"


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "nope.json"), environ={})


def test_unsupported_config_format(tmp_path):
    path = tmp_path / "assertsupport.yaml"
    path.write_text("diff: {}\n")
    with pytest.raises(RuntimeError, match="Unsupported config format"):
        load_settings(str(path), environ={})


def test_negative_context_lines():
    with pytest.raises(ValueError):
        load_settings(environ={"ASSERTSUPPORT_DIFF__CONTEXT_LINES": "-1"})


def test_load_config_custom_defaults():
    cfg = load_config({"diff": {"color": False}}, environ={"ASSERTSUPPORT_DIFF__COLOR": "on"})
    assert cfg == {"diff": {"color": True}}


def test_env_provider_coercion():
    env = {
        "X_A": "1",
        "X_B": "0.5",
        "X_C": "off",
        "X_D__E": '{"k": [1, 2]}',
        "X_F": " text ",
    }
    assert EnvProvider(prefix="X_", environ=env).load() == {
        "a": 1,
        "b": 0.5,
        "c": False,
        "d": {"e": {"k": [1, 2]}},
        "f": "text",
    }


def test_manager_precedence(tmp_path):
    path = tmp_path / "c.json"
    path.write_text(json.dumps({"diff": {"color": True}}))
    providers = [
        DictProvider(data={"diff": {"color": False, "context_lines": 3}}),
        FileProvider(path=str(path)),
        EnvProvider(environ={"ASSERTSUPPORT_DIFF__CONTEXT_LINES": "9"}),
    ]
    assert ConfigManager(providers).load() == {"diff": {"color": True, "context_lines": 9}}


def test_dict_provider_returns_a_copy():
    data = {"diff": {"color": False}}
    loaded = DictProvider(data=data).load()
    loaded["diff"]["color"] = True
    assert data["diff"]["color"] is False
