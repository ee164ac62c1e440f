# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Configuration management for RDCMan certificate provisioning."""

import os
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_export_folder() -> Path:
    """C:\\Test on Windows, ~/Test elsewhere."""
    if os.name == "nt":
        return Path("C:\\Test")
    return Path.home() / "Test"


def default_store_path() -> Path:
    return Path.home() / ".rdcman_cert" / "store"


class Settings(BaseSettings):
    """Provisioning settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RDCMAN_CERT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Certificate
    certificate_name: str = Field(
        default="RDCManagerCertificate",
        description="Subject and file base name (first dot-delimited segment)",
    )
    validity_years: int = Field(default=5, description="Certificate validity in years")
    key_size: int = Field(default=2048, description="RSA key size in bits")

    # Credential
    password: SecretStr = Field(
        default=SecretStr("p@ssw0rd"),
        description="Plain-text password protecting the exported PFX",
    )

    # Locations
    export_folder: Path = Field(
        default_factory=default_export_folder,
        description="Directory receiving the exported PFX",
    )
    store_path: Path = Field(
        default_factory=default_store_path,
        description="Local certificate store directory",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level: {value} (must be one of {', '.join(LOG_LEVELS)})"
            )
        return level
