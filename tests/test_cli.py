"""Tests for the docbench CLI."""

import json

import pytest
from typer.testing import CliRunner

from docbench.cli import app

runner = CliRunner()


@pytest.fixture
def memory_env(monkeypatch):
    monkeypatch.setenv("DOCUMENTDB_ENDPOINT", "memory://")
    monkeypatch.setenv("DOCUMENTDB_CREDENTIAL", "secret")
    monkeypatch.setenv("DOCUMENTDB_CLIENT_TYPE", "memory")


class TestConfigCommand:
    def test_prints_masked_settings(self, memory_env):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["endpoint"] == "memory://"
        assert data["credential"] == "***"
        assert data["database"] == "testdb"
        assert "secret" not in result.stdout

    def test_missing_configuration(self):
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 2


class TestSmokeCommand:
    def test_smoke_against_memory_store(self, memory_env):
        result = runner.invoke(app, ["smoke", "--table", "usertable", "--key", "smoke1"])

        assert result.exit_code == 0
        for step in ("insert", "read", "update", "scan", "delete"):
            assert step in result.stdout
        assert "ERROR" not in result.stdout
        assert '"field1": "updated"' not in result.stdout
        assert '"id": "smoke1"' in result.stdout

    def test_smoke_single_partition(self, memory_env, monkeypatch):
        monkeypatch.setenv("DOCUMENTDB_SINGLE_PARTITION", "true")

        result = runner.invoke(app, ["smoke"])

        assert result.exit_code == 0
