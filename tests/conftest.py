"""Pytest configuration and shared fixtures."""

import json

import duckdb
import pytest
from click.testing import CliRunner

from ftool import config
from ftool.cli import cli
from ftool.context import Services

from tests.helpers import GEOJSON, make_people, write_csv


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point FTOOL_HOME at a temp dir and drop cached settings."""
    home = tmp_path / "ftool_home"
    monkeypatch.setenv("FTOOL_HOME", str(home))
    monkeypatch.delenv("FTOOL_LOG_LEVEL", raising=False)
    config.reset()
    yield home
    config.reset()


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args.

    Usage:
        result = invoke(["inspect", "data.csv", "--row-count"])
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(cli, args, input=input_data)

    return _invoke


@pytest.fixture
def people():
    return make_people()


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def people_csv(data_dir, people):
    """120-row CSV: id, name, age, city."""
    return write_csv(data_dir / "people.csv", ["id", "name", "age", "city"], people)


@pytest.fixture
def people_parquet(tmp_path, people_csv):
    """Parquet copy of people.csv in its own directory."""
    target_dir = tmp_path / "parquet"
    target_dir.mkdir()
    target = target_dir / "people.parquet"
    conn = duckdb.connect()
    try:
        conn.execute(
            f"COPY (SELECT * FROM read_csv_auto('{people_csv}')) TO '{target}' (FORMAT PARQUET)"
        )
    finally:
        conn.close()
    return target


@pytest.fixture
def sample_json(data_dir):
    path = data_dir / "config.json"
    path.write_text(
        json.dumps(
            {
                "name": "demo",
                "tags": ["a", "b"],
                "nested": {"level": {"deep": True}},
                "empty": {},
                "missing": None,
            }
        )
    )
    return path


@pytest.fixture
def geojson_value():
    return json.loads(json.dumps(GEOJSON))


@pytest.fixture
def sample_geojson(data_dir):
    path = data_dir / "places.geojson"
    path.write_text(json.dumps(GEOJSON))
    return path


@pytest.fixture
def services():
    return Services()
