"""Tests for settings resolution."""

import pytest
from pydantic import ValidationError

from docbench.client import ConnectionMode, ConsistencyLevel
from docbench.config import Settings, get_settings, load_settings
from docbench.errors import ConfigurationError


class TestDefaults:
    def test_defaults(self):
        s = load_settings(endpoint="https://localhost:443/", credential="key")

        assert s.database == "testdb"
        assert s.single_partition is False
        assert s.upsert is False
        assert s.connection_mode is ConnectionMode.GATEWAY
        assert s.consistency_level is ConsistencyLevel.SESSION
        assert s.client_type == "cosmos"
        assert s.debug is False

    def test_credential_is_secret(self):
        s = load_settings(endpoint="https://localhost:443/", credential="key")

        assert "key" not in repr(s)
        assert s.credential.get_secret_value() == "key"


class TestRequiredOptions:
    def test_missing_endpoint(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(credential="key")

        assert exc_info.value.key == "endpoint"

    def test_missing_credential(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(endpoint="https://localhost:443/")

        assert exc_info.value.key == "credential"

    def test_empty_credential(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(endpoint="https://localhost:443/", credential="")

        assert exc_info.value.key == "credential"
        assert isinstance(exc_info.value.cause, ValidationError)

    def test_invalid_consistency_level(self):
        with pytest.raises(ConfigurationError):
            load_settings(endpoint="e", credential="k", consistency_level="linearizable")


class TestEnvironment:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DOCUMENTDB_ENDPOINT", "https://example.documents.azure.com:443/")
        monkeypatch.setenv("DOCUMENTDB_CREDENTIAL", "key")
        monkeypatch.setenv("DOCUMENTDB_UPSERT", "true")
        monkeypatch.setenv("DOCUMENTDB_CONSISTENCY_LEVEL", "eventual")

        s = get_settings()

        assert s.endpoint == "https://example.documents.azure.com:443/"
        assert s.upsert is True
        assert s.consistency_level is ConsistencyLevel.EVENTUAL

    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.setenv("DOCUMENTDB_ENDPOINT", "e")
        monkeypatch.setenv("DOCUMENTDB_CREDENTIAL", "k")

        assert get_settings() is get_settings()

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("DOCUMENTDB_ENDPOINT=from-dotenv\nDOCUMENTDB_CREDENTIAL=k\n")

        assert load_settings().endpoint == "from-dotenv"


class TestProperties:
    def test_harness_property_names(self):
        s = Settings.from_properties(
            {
                "documentdb.host": "https://localhost:443/",
                "documentdb.primaryKey": "key",
                "documentdb.database": "bench",
                "documentdb.singlePartition": "true",
                "documentdb.upsert": "true",
                "documentdb.connectionMode": "Direct",
                "documentdb.consistencyLevel": "BoundedStaleness",
                "documentdb.debug": "true",
                "recordcount": "1000",
            }
        )

        assert s.database == "bench"
        assert s.single_partition is True
        assert s.upsert is True
        assert s.connection_mode is ConnectionMode.DIRECT
        assert s.consistency_level is ConsistencyLevel.BOUNDED_STALENESS
        assert s.debug is True

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Session", ConsistencyLevel.SESSION),
            ("STRONG", ConsistencyLevel.STRONG),
            ("consistent-prefix", ConsistencyLevel.CONSISTENT_PREFIX),
            ("ConsistentPrefix", ConsistencyLevel.CONSISTENT_PREFIX),
        ],
    )
    def test_consistency_level_spellings(self, raw, expected):
        s = load_settings(endpoint="e", credential="k", consistency_level=raw)
        assert s.consistency_level is expected

    def test_overrides_win(self):
        s = Settings.from_properties(
            {"documentdb.host": "a", "documentdb.primaryKey": "k"}, endpoint="b"
        )
        assert s.endpoint == "b"

    def test_missing_primary_key_property(self):
        with pytest.raises(ConfigurationError):
            Settings.from_properties({"documentdb.host": "a"})


class TestImmutability:
    def test_settings_frozen(self):
        s = load_settings(endpoint="e", credential="k")

        with pytest.raises(ValidationError):
            s.upsert = True

    def test_public_dict_masks_credential(self):
        data = load_settings(endpoint="e", credential="k").public_dict()

        assert data["credential"] == "***"
        assert data["consistency_level"] == "session"
