# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
PKCS#12 (.pfx) export and import.

An exported file carries the certificate and its private key encrypted
under the supplied password, which is all another machine needs to import
the certificate into its own store.
"""

import logging
import os
import tempfile
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from .credentials import ProtectedPassword
from .exceptions import ExportNotAllowedError, PfxError, StoreError
from .store import CertificateStore, StoredCertificate

logger = logging.getLogger(__name__)


def export_pfx(entry: StoredCertificate, password: ProtectedPassword, path: Path) -> Path:
    """
    Write a store entry to a password-protected PFX file.

    Args:
        entry: Store entry to export
        password: Encryption password
        path: Output file path

    Returns:
        Path of the written file

    Raises:
        ExportNotAllowedError: If the entry's private key is not exportable
        PfxError: If serialization or writing fails
    """
    if not entry.exportable:
        raise ExportNotAllowedError(
            f"Private key of {entry.thumbprint} is not marked exportable"
        )

    path = Path(path)
    try:
        data = pkcs12.serialize_key_and_certificates(
            name=entry.subject.encode("utf-8"),
            key=entry.private_key,
            cert=entry.certificate,
            cas=None,
            encryption_algorithm=serialization.BestAvailableEncryption(password.as_bytes()),
        )
    except (ValueError, TypeError) as e:
        raise PfxError(f"Failed to export {entry.thumbprint} to {path}: {e}") from e

    # Temp file moved into place so a failed write leaves no partial export
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise PfxError(f"Failed to export {entry.thumbprint} to {path}: {e}") from e

    logger.debug(f"Exported {entry.thumbprint} to {path} ({len(data)} bytes)")
    return path


def import_pfx(
    path: Path,
    password: ProtectedPassword,
    store: CertificateStore,
    exportable: bool = True,
) -> StoredCertificate:
    """
    Load a PFX file and add its certificate to a store.

    Args:
        path: PFX file to import
        password: Decryption password
        store: Destination store
        exportable: Mark the imported private key exportable

    Returns:
        The new store entry

    Raises:
        PfxError: If the file is unreadable, the password is wrong, or the
            file lacks a certificate or key
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = f.read()
        private_key, certificate, _ = pkcs12.load_key_and_certificates(
            data, password.as_bytes()
        )
    except (OSError, ValueError, TypeError) as e:
        raise PfxError(f"Failed to read {path}: {e}") from e

    if certificate is None or private_key is None:
        raise PfxError(f"{path} does not contain both a certificate and a private key")

    try:
        entry = store.add(certificate, private_key, exportable=exportable)
    except StoreError as e:
        raise PfxError(f"Failed to import {path}: {e}") from e

    logger.debug(f"Imported {entry.thumbprint} from {path}")
    return entry
