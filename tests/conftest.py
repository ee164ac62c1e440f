# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Shared fixtures for rdcman_cert tests."""

import os

import pytest

from rdcman_cert.store import CertificateStore


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep real environment variables and .env files out of Settings."""
    for key in list(os.environ):
        if key.upper().startswith("RDCMAN_CERT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def store(tmp_path):
    return CertificateStore(tmp_path / "store")
