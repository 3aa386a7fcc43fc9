"""
Application settings.

Settings come from environment variables; a .env file is loaded first with
python-dotenv so local runs need no exported variables.
"""

import os
from pathlib import Path
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from transaction_processor.core.errors import ConfigurationError
from transaction_processor.observability.logger import LOG_LEVELS
from transaction_processor.utils.validation import InputValidationError, validate_snapshot_key


class Settings(BaseModel):
    """
    Runtime configuration for the engine and its shells.

    Attributes:
        store_backend: "memory" (process-local) or "postgres" (shared)
        snapshot_key: Key the current snapshot is stored under
        db_host, db_port, db_name, db_user, db_password: PostgreSQL connection
        db_pool_min_size, db_pool_max_size: Connection pool bounds
        csv_delimiter: Upload field delimiter
        csv_encoding: Upload text encoding
        field_map_path: Optional YAML file overriding column names
        cors_origins: Origins allowed to call the HTTP API
        api_host, api_port: HTTP bind address
        log_level: Root log level
    """

    store_backend: Literal["memory", "postgres"] = "memory"
    snapshot_key: str = "transactions"

    db_host: str = "localhost"
    db_port: int = Field(5432, gt=0, lt=65536)
    db_name: str = "transactions"
    db_user: str = "ledger"
    db_password: str | None = None
    db_pool_min_size: int = Field(1, ge=1)
    db_pool_max_size: int = Field(5, ge=1)

    csv_delimiter: str = Field(",", min_length=1, max_length=1)
    csv_encoding: str = "utf-8-sig"
    field_map_path: Path | None = None

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    api_host: str = "127.0.0.1"
    api_port: int = Field(3001, gt=0, lt=65536)

    log_level: str = "INFO"

    @field_validator("snapshot_key")
    @classmethod
    def check_snapshot_key(cls, v):
        try:
            return validate_snapshot_key(v)
        except InputValidationError as e:
            raise ValueError(str(e))

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v):
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}, got {v!r}")
        return level

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Settings":
        """
        Build settings from the environment.

        Args:
            env_file: Optional .env file; when omitted a .env in the working
                directory (or a parent) is used if present

        Returns:
            Validated settings

        Raises:
            ConfigurationError: If a variable has an invalid value
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        env_names = {
            "store_backend": "STORE_BACKEND",
            "snapshot_key": "SNAPSHOT_KEY",
            "db_host": "DB_HOST",
            "db_port": "DB_PORT",
            "db_name": "DB_NAME",
            "db_user": "DB_USER",
            "db_password": "DB_PASSWORD",
            "db_pool_min_size": "DB_POOL_MIN_SIZE",
            "db_pool_max_size": "DB_POOL_MAX_SIZE",
            "csv_delimiter": "CSV_DELIMITER",
            "csv_encoding": "CSV_ENCODING",
            "field_map_path": "FIELD_MAP_PATH",
            "api_host": "API_HOST",
            "api_port": "API_PORT",
            "log_level": "LOG_LEVEL",
        }
        values: dict = {
            field: os.environ[name]
            for field, name in env_names.items()
            if os.environ.get(name)
        }

        cors = os.environ.get("CORS_ORIGINS")
        if cors:
            values["cors_origins"] = [origin.strip() for origin in cors.split(",") if origin.strip()]

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
