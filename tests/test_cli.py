"""Test cases for the inisupport-config command line tool."""

from pathlib import Path

import pytest
import yaml
from inisupport.cli import main
from tests.conftest import write_ini_file
from tests.data.samples import SERVICE_CONF


@pytest.fixture
def service_conf(temp_dir: Path) -> Path:
    path = temp_dir / "service.conf"
    write_ini_file(path, SERVICE_CONF)
    return path


def test_print_configuration_with_overrides(service_conf: Path, capsys: pytest.CaptureFixture):
    """Test printing the final configuration.

    Given a configuration file and a command line override
    When the tool runs with --print
    Then the YAML output shows the override over the file value
    """
    status = main(["--config", str(service_conf), "--print", "db:port=6000", "cache:size=64"])

    assert status == 0
    printed = yaml.safe_load(capsys.readouterr().out)
    assert printed["db"]["port"] == "6000"
    assert printed["db"]["host"] == "db.internal"
    assert printed["cache"] == {"size": "64"}


def test_get_single_key(service_conf: Path, capsys: pytest.CaptureFixture):
    assert main(["--config", str(service_conf), "--get", "log:ident"]) == 0
    assert capsys.readouterr().out == "quilt-test\n"

    assert main(["--config", str(service_conf), "--get", "log:missing"]) == 1


def test_list_section(service_conf: Path, capsys: pytest.CaptureFixture):
    assert main(["--default-path", str(service_conf), "--section", "db", "--key", "host"]) == 0

    assert capsys.readouterr().out == "db:host=db.internal\n"


def test_missing_file_fails(temp_dir: Path, capsys: pytest.CaptureFixture):
    assert main(["--config", str(temp_dir / "missing.conf")]) == 1
    assert capsys.readouterr().out == ""
