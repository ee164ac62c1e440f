# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Tests for settings defaults and environment overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rdcman_cert.config import Settings, default_export_folder


class TestSettings:
    """Test Settings loading."""

    def test_defaults(self):
        settings = Settings()

        assert settings.certificate_name == "RDCManagerCertificate"
        assert settings.password.get_secret_value() == "p@ssw0rd"
        assert settings.validity_years == 5
        assert settings.key_size == 2048
        assert settings.export_folder == default_export_folder()
        assert settings.log_level == "INFO"

    def test_password_hidden(self):
        assert "p@ssw0rd" not in repr(Settings())

    def test_environment_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RDCMAN_CERT_CERTIFICATE_NAME", "Team.pfx")
        monkeypatch.setenv("RDCMAN_CERT_VALIDITY_YEARS", "10")
        monkeypatch.setenv("RDCMAN_CERT_EXPORT_FOLDER", str(tmp_path))
        monkeypatch.setenv("RDCMAN_CERT_LOG_LEVEL", "debug")

        settings = Settings()

        assert settings.certificate_name == "Team.pfx"
        assert settings.validity_years == 10
        assert settings.export_folder == Path(tmp_path)
        assert settings.log_level == "DEBUG"

    def test_dotenv_file(self, tmp_path):
        """A .env file in the working directory is read."""
        (tmp_path / ".env").write_text("RDCMAN_CERT_PASSWORD=from-dotenv\n")
        assert Settings().password.get_secret_value() == "from-dotenv"

    def test_init_overrides_environment(self, monkeypatch):
        monkeypatch.setenv("RDCMAN_CERT_VALIDITY_YEARS", "10")
        assert Settings(validity_years=2).validity_years == 2

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("RDCMAN_CERT_LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError):
            Settings()

    def test_log_level_case_insensitive(self):
        assert Settings(log_level="warning").log_level == "WARNING"
