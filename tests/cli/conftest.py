"""Fixtures for CLI tests."""

import json

import pytest
from click.testing import CliRunner

from sitegrid.cli.main import cli


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def config_file(tmp_path):
    """Config file that disables sample data."""
    path = tmp_path / "sitegrid-test.yaml"
    path.write_text("seed: false\n")
    return path


@pytest.fixture
def run(data_dir, config_file):
    """Invoke the CLI against an isolated, initially empty data directory."""
    runner = CliRunner()

    def invoke(*args, input=None):
        return runner.invoke(
            cli,
            ["-c", str(config_file), "-d", str(data_dir), *args],
            input=input,
            catch_exceptions=False,
        )

    return invoke


@pytest.fixture
def stored(data_dir):
    """Read the persisted snapshot."""

    def read():
        return json.loads((data_dir / "snapshot.json").read_text())

    return read


@pytest.fixture
def website_ids(stored):
    """Ids of the persisted websites in page order."""

    def ids():
        websites = stored()["data"]["websites"]
        websites.sort(key=lambda w: (w["position"]["page"], w["position"]["order"]))
        return [w["id"] for w in websites]

    return ids
