# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Local certificate store.

File-backed stand-in for a per-user certificate store ("CurrentUser\\My").
Each entry is one JSON document named after the certificate thumbprint and
holds the PEM certificate, the PEM private key and the exportable flag.
Entries are written to a temp file first and moved into place, so a failed
add never leaves a partial entry behind.
"""

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes
from cryptography.x509.oid import NameOID

from .exceptions import CertificateNotFoundError, StoreError

logger = logging.getLogger(__name__)

THUMBPRINT_PATTERN = re.compile(r"[0-9A-Fa-f]{40}")


def certificate_thumbprint(cert: x509.Certificate) -> str:
    """SHA-1 thumbprint as upper-case hex, the way certificate stores show it."""
    return cert.fingerprint(hashes.SHA1()).hex().upper()


def certificate_subject(cert: x509.Certificate) -> str:
    """Common name of the certificate subject (empty string if absent)."""
    attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    return attrs[0].value if attrs else ""


@dataclass
class StoredCertificate:
    """A certificate with its private key, as held by the store."""

    certificate: x509.Certificate
    private_key: PrivateKeyTypes
    exportable: bool = True

    @property
    def thumbprint(self) -> str:
        return certificate_thumbprint(self.certificate)

    @property
    def subject(self) -> str:
        return certificate_subject(self.certificate)

    @property
    def not_valid_after(self) -> datetime:
        return self.certificate.not_valid_after_utc

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "thumbprint": self.thumbprint,
            "subject": self.subject,
            "exportable": self.exportable,
            "not_valid_after": self.not_valid_after.isoformat(),
            "certificate": self.certificate.public_bytes(
                serialization.Encoding.PEM
            ).decode("utf-8"),
            "private_key": self.private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            ).decode("utf-8"),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoredCertificate":
        """Rebuild an entry from its JSON document."""
        certificate = x509.load_pem_x509_certificate(data["certificate"].encode("utf-8"))
        private_key = serialization.load_pem_private_key(
            data["private_key"].encode("utf-8"),
            password=None,
        )
        return cls(
            certificate=certificate,
            private_key=private_key,
            exportable=data.get("exportable", False),
        )


class CertificateStore:
    """
    Per-user certificate store rooted at a directory.

    The directory is created on first use.
    """

    def __init__(self, root: Path):
        """
        Initialize store.

        Args:
            root: Directory holding the store entries
        """
        self.root = Path(root).expanduser()

    def _entry_path(self, thumbprint: str) -> Path:
        if not isinstance(thumbprint, str) or not THUMBPRINT_PATTERN.fullmatch(thumbprint):
            raise CertificateNotFoundError(f"Invalid thumbprint: {thumbprint!r}")
        return self.root / f"{thumbprint.upper()}.json"

    def add(
        self,
        certificate: x509.Certificate,
        private_key: PrivateKeyTypes,
        exportable: bool = True,
    ) -> StoredCertificate:
        """
        Add a certificate and its private key to the store.

        An existing entry with the same thumbprint is replaced.

        Args:
            certificate: Certificate to store
            private_key: Matching private key
            exportable: Whether the private key may be exported later

        Returns:
            The stored entry

        Raises:
            StoreError: If the entry could not be written
        """
        entry = StoredCertificate(certificate, private_key, exportable)
        target = self._entry_path(entry.thumbprint)

        try:
            self.root.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.root, suffix=".tmp")
        except OSError as e:
            raise StoreError(f"Cannot write to store {self.root}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entry.to_dict(), f, indent=2)
            os.replace(tmp_name, target)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Cannot write store entry {target.name}: {e}") from e

        logger.debug(f"Stored certificate {entry.thumbprint} (CN={entry.subject})")
        return entry

    def get(self, thumbprint: str) -> StoredCertificate:
        """
        Load one entry.

        Raises:
            CertificateNotFoundError: If no entry has this thumbprint
            StoreError: If the entry exists but cannot be read
        """
        path = self._entry_path(thumbprint)
        if not path.exists():
            raise CertificateNotFoundError(f"Certificate not found in store: {thumbprint}")
        return self._load(path)

    def _load(self, path: Path) -> StoredCertificate:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return StoredCertificate.from_dict(data)
        except (
            OSError, ValueError, KeyError, TypeError, AttributeError, UnsupportedAlgorithm
        ) as e:
            raise StoreError(f"Corrupt store entry {path.name}: {e}") from e

    def list(self) -> List[StoredCertificate]:
        """Enumerate all entries, ordered by thumbprint."""
        if not self.root.exists():
            return []
        return [self._load(path) for path in sorted(self.root.glob("*.json"))]

    def find_by_subject(self, subject: str) -> List[StoredCertificate]:
        """All entries whose subject common name equals `subject`."""
        return [entry for entry in self.list() if entry.subject == subject]

    def remove(self, thumbprint: str) -> None:
        """
        Delete an entry.

        Raises:
            CertificateNotFoundError: If no entry has this thumbprint
            StoreError: If the entry could not be deleted
        """
        path = self._entry_path(thumbprint)
        if not path.exists():
            raise CertificateNotFoundError(f"Certificate not found in store: {thumbprint}")
        try:
            path.unlink()
        except OSError as e:
            raise StoreError(f"Cannot delete store entry {path.name}: {e}") from e

        logger.debug(f"Removed certificate {thumbprint} from store")

    def __contains__(self, thumbprint: str) -> bool:
        try:
            return self._entry_path(thumbprint).exists()
        except CertificateNotFoundError:
            return False

    def __len__(self) -> int:
        if not self.root.exists():
            return 0
        return len(list(self.root.glob("*.json")))
