from __future__ import annotations

import json

import pytest

from poddiag.config import CONFIG_FILE_NAME, ConfigError, config_dir_path, load_settings, write_default_config


def test_defaults(clean_env):
    settings = load_settings()
    assert settings.constants.pulse_size == 0.05
    assert settings.constants.maximum_reservoir_reading == 50.0
    assert settings.ref_label == "Ref"
    assert settings.config_dir == clean_env / "xdg" / "poddiag"


def test_config_dir_env(clean_env, monkeypatch):
    monkeypatch.setenv("PODDIAG_CONFIG_DIR", str(clean_env / "custom"))
    assert config_dir_path() == clean_env / "custom"
    assert config_dir_path(clean_env / "explicit") == clean_env / "explicit"


def test_file_values(clean_env):
    path = clean_env / "cfg" / CONFIG_FILE_NAME
    write_default_config(path, data={"pulse_size": 0.1, "maximum_reservoir_reading": 80, "ref_label": "PDM"})
    settings = load_settings(config_dir=clean_env / "cfg")
    assert settings.constants.pulse_size == 0.1
    assert settings.constants.maximum_reservoir_reading == 80.0
    assert settings.ref_label == "PDM"


def test_precedence(clean_env, monkeypatch):
    path = clean_env / "cfg" / CONFIG_FILE_NAME
    write_default_config(path, data={"pulse_size": 0.1, "ref_label": "File"})
    monkeypatch.setenv("PODDIAG_PULSE_SIZE", "0.2")
    monkeypatch.setenv("PODDIAG_REF_LABEL", "Env")

    settings = load_settings(config_dir=clean_env / "cfg")
    assert settings.constants.pulse_size == 0.2
    assert settings.ref_label == "Env"

    settings = load_settings(config_dir=clean_env / "cfg", pulse_size=0.025, ref_label="Arg")
    assert settings.constants.pulse_size == 0.025
    assert settings.ref_label == "Arg"


def test_default_config_file_round_trips(clean_env):
    path = clean_env / "cfg" / CONFIG_FILE_NAME
    write_default_config(path)
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "maximum_reservoir_reading": 50.0,
        "pulse_size": 0.05,
        "ref_label": "Ref",
    }
    assert load_settings(config_dir=clean_env / "cfg").to_dict()["pulse_size"] == 0.05


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        '{"pulse_size": "big"}',
        '{"pulse_size": 0}',
        '{"ref_label": ""}',
        '{"colour": "red"}',
    ],
)
def test_invalid_file(clean_env, content):
    cfg = clean_env / "cfg"
    cfg.mkdir()
    (cfg / CONFIG_FILE_NAME).write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(config_dir=cfg)


def test_invalid_env(clean_env, monkeypatch):
    monkeypatch.setenv("PODDIAG_MAX_RESERVOIR", "lots")
    with pytest.raises(ConfigError):
        load_settings()
