import json

import pytest
import yaml
from click.testing import CliRunner

from funcy_invoke.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def quiet_config(isolated_home):
    # Keep log records out of the captured output so stdout parses as JSON
    isolated_home.mkdir(parents=True, exist_ok=True)
    (isolated_home / "config.yaml").write_text(yaml.safe_dump({
        "modules": ["sample_functions"],
        "logging": {"level": "CRITICAL", "format": "structured"},
    }))
    return isolated_home


def test_init_command_creates_files(runner, isolated_home):
    result = runner.invoke(main, ["init"])
    assert result.exit_code == 0
    assert "Initialized funcy config" in result.output

    assert (isolated_home / "config.yaml").exists()
    assert (isolated_home / ".env").exists()

    cfg = yaml.safe_load((isolated_home / "config.yaml").read_text())
    assert cfg["modules"] == []
    assert cfg["logging"]["level"] == "INFO"


def test_init_does_not_overwrite_without_force(runner, isolated_home):
    isolated_home.mkdir(parents=True)
    (isolated_home / "config.yaml").write_text("modules: []")

    result = runner.invoke(main, ["init"])
    assert result.exit_code == 1
    assert "Config already exists" in result.output
    assert (isolated_home / "config.yaml").read_text() == "modules: []"


def test_init_force_overwrites(runner, isolated_home):
    isolated_home.mkdir(parents=True)
    (isolated_home / "config.yaml").write_text("modules: []")

    result = runner.invoke(main, ["init", "--force"])
    assert result.exit_code == 0

    cfg = yaml.safe_load((isolated_home / "config.yaml").read_text())
    assert "logging" in cfg


def test_invalid_config_exits(runner, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("logging: {format: xml}")

    result = runner.invoke(main, ["--config", str(path), "list"])
    assert result.exit_code == 1
    assert "logging.format" in result.output


def test_list_functions(runner, quiet_config):
    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert "mypackage.Function1(param: str) -> (bytes, Details," in result.output
    assert "mypackage.Function4" in result.output


def test_list_types(runner, quiet_config):
    result = runner.invoke(main, ["list", "--types"])
    assert result.exit_code == 0
    assert "mypackage.Data  {ID, Name}" in result.output


def test_list_empty(runner):
    result = runner.invoke(main, ["list"])
    assert result.exit_code == 0
    assert "No functions registered." in result.output


def test_list_with_module_option(runner):
    result = runner.invoke(main, ["list", "-m", "sample_functions"])
    assert result.exit_code == 0
    assert "mypackage.Function2" in result.output


def test_list_bad_module(runner):
    result = runner.invoke(main, ["list", "-m", "json"])
    assert result.exit_code == 1
    assert "Failed to load modules" in result.output


def test_invoke_success(runner, quiet_config):
    result = runner.invoke(main, ["invoke", "mypackage.Function1", "abc"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {
        "result": ["YWJj", {"Description": "Example details", "Value": 42}]
    }


def test_invoke_record_argument(runner, quiet_config):
    result = runner.invoke(
        main, ["invoke", "mypackage.Function3", '{"ID": 9, "Name": "nine"}']
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == {"result": [{"Description": "nine", "Value": 9}]}


def test_invoke_business_error(runner, quiet_config):
    result = runner.invoke(main, ["invoke", "mypackage.Function1", '""'])
    assert result.exit_code == 1
    assert json.loads(result.output) == {"error": "param cannot be empty"}


def test_invoke_unknown_function(runner, quiet_config):
    result = runner.invoke(main, ["invoke", "nope.Function"])
    assert result.exit_code == 1
    assert "function nope.Function not found" in result.output


def test_invoke_request_from_stdin(runner, quiet_config):
    request = {"type": "function", "func": "mypackage.Function2", "params": ["x", 5]}
    result = runner.invoke(main, ["invoke", "--request", "-"], input=json.dumps(request))
    assert result.exit_code == 0
    assert json.loads(result.output) == {"result": [{"Description": "x", "Value": 5}]}


def test_invoke_request_with_name_rejected(runner, quiet_config):
    result = runner.invoke(main, ["invoke", "mypackage.Function1", "--request", "-"], input="{}")
    assert result.exit_code == 2
    assert "cannot be combined" in result.output


def test_invoke_requires_name(runner, quiet_config):
    result = runner.invoke(main, ["invoke"])
    assert result.exit_code == 2
    assert "NAME is required" in result.output
