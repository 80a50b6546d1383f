"""Configuration management using Pydantic Settings."""

import re
from typing import Any, Literal, Mapping

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docbench.client.base import ConnectionMode, ConsistencyLevel
from docbench.errors import ConfigurationError

# Harness property name -> settings field
PROPERTY_NAMES = {
    "documentdb.host": "endpoint",
    "documentdb.primaryKey": "credential",
    "documentdb.database": "database",
    "documentdb.singlePartition": "single_partition",
    "documentdb.upsert": "upsert",
    "documentdb.connectionMode": "connection_mode",
    "documentdb.consistencyLevel": "consistency_level",
    "documentdb.clientType": "client_type",
    "documentdb.debug": "debug",
    "documentdb.logFormat": "log_format",
}


class Settings(BaseSettings):
    """Binding settings, resolved once at startup and read-only afterwards."""

    model_config = SettingsConfigDict(
        env_prefix="DOCUMENTDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Store
    endpoint: str
    credential: SecretStr
    database: str = "testdb"

    # Request policy
    single_partition: bool = False
    upsert: bool = False

    # Connection
    connection_mode: ConnectionMode = ConnectionMode.GATEWAY
    consistency_level: ConsistencyLevel = ConsistencyLevel.SESSION
    client_type: Literal["cosmos", "memory"] = "cosmos"

    # Logging
    debug: bool = False
    log_format: Literal["json", "console"] = "console"

    @field_validator("endpoint")
    @classmethod
    def _endpoint_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("endpoint must not be empty")
        return value.strip()

    @field_validator("credential")
    @classmethod
    def _credential_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("Missing primary key, cannot continue")
        return value

    @field_validator("connection_mode", "consistency_level", mode="before")
    @classmethod
    def _normalise_enum(cls, value: Any) -> Any:
        # Accept "Session", "BoundedStaleness", "bounded-staleness", ...
        if isinstance(value, str):
            text = value.strip().replace("-", "_")
            if text.isupper() or "_" in text:
                return text.lower()
            return re.sub(r"(?<!^)(?=[A-Z])", "_", text).lower()
        return value

    @classmethod
    def from_properties(cls, properties: Mapping[str, str], **overrides: Any) -> "Settings":
        """Build settings from harness properties such as ``documentdb.host``."""
        values = {
            PROPERTY_NAMES[name]: value
            for name, value in properties.items()
            if name in PROPERTY_NAMES
        }
        values.update(overrides)
        return load_settings(**values)

    def public_dict(self) -> dict[str, Any]:
        """Settings as plain values with the credential masked."""
        data = self.model_dump(mode="json")
        data["credential"] = "***"
        return data


def load_settings(**values: Any) -> Settings:
    """
    Resolve settings from keyword values, environment and ``.env``.

    Raises:
        ConfigurationError: If a required option is missing or invalid
    """
    try:
        return Settings(**values)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigurationError(
            f"Invalid configuration for {key}: {first['msg']}", key=key, cause=e
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
