"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field
from sqlalchemy.engine import URL, make_url

DEFAULT_COVER_URL_TEMPLATE = "https://covers.openlibrary.org/b/isbn/{isbn}-L.jpg"


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model.

    The connection is described either by a complete SQLAlchemy ``url`` or by the
    individual PostgreSQL settings (user, host, name, password, port) that the
    deployment environment provides.
    """

    url: str | None = Field(
        default=None,
        description="Full SQLAlchemy connection URL; overrides the individual settings",
    )
    user: str = Field(default="postgres", description="Database username")
    host: str = Field(default="localhost", description="Database host")
    name: str = Field(default="booknotes", description="Database name")
    password: str | None = Field(default=None, description="Database password")
    port: int = Field(default=5432, description="Database port")
    driver: str = Field(default="postgresql", description="SQLAlchemy drivername")
    pool_size: int = Field(default=1, description="Connection pool size")
    max_overflow: int = Field(default=0, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string."""
        if self.url:
            return make_url(self.url).render_as_string(hide_password=False)

        url = URL.create(
            drivername=self.driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name,
        )
        return url.render_as_string(hide_password=False)

    @property
    def backend(self) -> str:
        """Name of the database backend, e.g. ``postgresql`` or ``sqlite``."""
        return make_url(self.connection_string).get_backend_name()


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=3000, description="Application port")

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        host = "localhost" if self.host == "0.0.0.0" else self.host
        return f"{scheme}://{host}:{self.port}"


class CoversConfig(BaseModel):
    """Cover image lookup configuration."""

    url_template: str = Field(
        default=DEFAULT_COVER_URL_TEMPLATE,
        description="Cover image URL with an {isbn} placeholder",
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    covers: CoversConfig = Field(
        default_factory=CoversConfig, description="Cover image configuration"
    )
