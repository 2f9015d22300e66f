import os
import pytest
import yaml
from pathlib import Path
from funcy_invoke.config import FuncyConfig, get_funcy_home, load_config
from funcy_invoke.errors import ConfigError


def test_get_funcy_home_default(monkeypatch):
    monkeypatch.delenv("FUNCY_HOME", raising=False)
    home = get_funcy_home()
    assert home == Path("~/.config/funcy").expanduser()


def test_get_funcy_home_env_var(monkeypatch, tmp_path):
    custom_home = tmp_path / "custom_home"
    monkeypatch.setenv("FUNCY_HOME", str(custom_home))
    assert get_funcy_home() == custom_home


def test_load_config_defaults_without_file():
    cfg = load_config()
    assert cfg == FuncyConfig()
    assert cfg.modules == ()
    assert cfg.log_level == "INFO"
    assert cfg.log_format == "pretty"


def test_load_config_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Configuration file not found"):
        load_config(tmp_path / "nope.yaml")


def test_load_config_valid(isolated_home):
    isolated_home.mkdir(parents=True)
    config_data = {
        "modules": ["pkg.one", "pkg.two"],
        "logging": {"level": "debug", "format": "structured", "file": "/tmp/funcy.log"},
    }
    (isolated_home / "config.yaml").write_text(yaml.dump(config_data))

    cfg = load_config()
    assert cfg.modules == ("pkg.one", "pkg.two")
    assert cfg.log_level == "DEBUG"
    assert cfg.log_format == "structured"
    assert cfg.log_file == "/tmp/funcy.log"
    assert cfg.source == isolated_home / "config.yaml"


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == FuncyConfig()


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("modules: [unclosed")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_load_config_not_a_mapping(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_config(path)


def test_load_config_bad_modules(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"modules": "pkg.one"}))
    with pytest.raises(ConfigError, match="modules must be a list"):
        load_config(path)


def test_load_config_bad_log_format(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"logging": {"format": "xml"}}))
    with pytest.raises(ConfigError, match="logging.format"):
        load_config(path)


def test_load_config_bad_log_level(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"logging": {"level": "loud"}}))
    with pytest.raises(ConfigError, match="logging.level"):
        load_config(path)


def test_load_config_with_env_file(monkeypatch, tmp_path):
    env_file = tmp_path / ".env.test"
    env_file.write_text("FUNCY_TEST_VAR=loaded_from_env")

    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"env_file": str(env_file)}))

    # Register the var with monkeypatch so it is removed after the test
    monkeypatch.setenv("FUNCY_TEST_VAR", "placeholder")
    monkeypatch.delenv("FUNCY_TEST_VAR")

    load_config(path)
    assert os.environ.get("FUNCY_TEST_VAR") == "loaded_from_env"


def test_to_dict_round_trip():
    cfg = FuncyConfig(modules=("pkg.one",), log_level="WARNING", env_file="/tmp/.env")
    assert FuncyConfig.from_dict(cfg.to_dict()) == cfg
