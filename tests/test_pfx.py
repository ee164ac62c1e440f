# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Tests for PKCS#12 export and import."""

import pytest
from cryptography.hazmat.primitives.serialization import pkcs12
from pydantic import SecretStr

from rdcman_cert.credentials import ProtectedPassword
from rdcman_cert.exceptions import ExportNotAllowedError, PfxError
from rdcman_cert.generator import SelfSignedCertificateGenerator
from rdcman_cert.pfx import export_pfx, import_pfx
from rdcman_cert.store import CertificateStore


@pytest.fixture
def password():
    return ProtectedPassword(SecretStr("p@ssw0rd"))


@pytest.fixture
def entry(store):
    return SelfSignedCertificateGenerator(store).generate("RDCManagerCertificate", 5)


class TestExport:
    """Test writing PFX files."""

    def test_export_writes_encrypted_container(self, entry, password, tmp_path):
        path = export_pfx(entry, password, tmp_path / "RDCManagerCertificate.pfx")

        assert path.exists()
        loaded = pkcs12.load_pkcs12(path.read_bytes(), b"p@ssw0rd")
        assert loaded.cert.certificate == entry.certificate
        assert loaded.cert.friendly_name == b"RDCManagerCertificate"
        assert loaded.key is not None

    def test_non_exportable_refused(self, store, password, tmp_path):
        entry = SelfSignedCertificateGenerator(store).generate("Locked", 1, exportable=False)
        target = tmp_path / "Locked.pfx"

        with pytest.raises(ExportNotAllowedError):
            export_pfx(entry, password, target)
        assert not target.exists()

    def test_unwritable_target(self, entry, password, tmp_path):
        """Exporting onto a directory fails."""
        target = tmp_path / "RDCManagerCertificate.pfx"
        target.mkdir()

        with pytest.raises(PfxError):
            export_pfx(entry, password, target)

    def test_missing_folder(self, entry, password, tmp_path):
        with pytest.raises(PfxError):
            export_pfx(entry, password, tmp_path / "missing" / "cert.pfx")


class TestImport:
    """Test reading PFX files into a store."""

    def test_import_into_other_store(self, entry, password, tmp_path):
        """The exported file alone is enough to rebuild the entry elsewhere."""
        path = export_pfx(entry, password, tmp_path / "cert.pfx")
        other = CertificateStore(tmp_path / "other-machine")

        imported = import_pfx(path, password, other)

        assert imported.thumbprint == entry.thumbprint
        assert imported.subject == "RDCManagerCertificate"
        assert imported.thumbprint in other
        assert (
            imported.private_key.private_numbers() == entry.private_key.private_numbers()
        )

    def test_wrong_password(self, entry, password, tmp_path, store):
        path = export_pfx(entry, password, tmp_path / "cert.pfx")
        other = CertificateStore(tmp_path / "other")

        with pytest.raises(PfxError):
            import_pfx(path, ProtectedPassword(SecretStr("wrong")), other)
        assert len(other) == 0

    def test_corrupt_file(self, password, tmp_path, store):
        path = tmp_path / "broken.pfx"
        path.write_bytes(b"not a pkcs12 container")

        with pytest.raises(PfxError):
            import_pfx(path, password, store)

    def test_missing_file(self, password, tmp_path, store):
        with pytest.raises(PfxError):
            import_pfx(tmp_path / "absent.pfx", password, store)

    def test_certificate_without_key(self, entry, password, tmp_path, store):
        from cryptography.hazmat.primitives import serialization

        data = pkcs12.serialize_key_and_certificates(
            name=None,
            key=None,
            cert=entry.certificate,
            cas=None,
            encryption_algorithm=serialization.BestAvailableEncryption(b"p@ssw0rd"),
        )
        path = tmp_path / "nokey.pfx"
        path.write_bytes(data)

        with pytest.raises(PfxError):
            import_pfx(path, password, CertificateStore(tmp_path / "other"))


class TestAtomicExport:
    """Test that a failed write leaves no file behind."""

    def test_failed_replace_leaves_nothing(self, entry, password, tmp_path, monkeypatch):
        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("rdcman_cert.pfx.os.replace", failing_replace)
        target = tmp_path / "RDCManagerCertificate.pfx"

        with pytest.raises(PfxError):
            export_pfx(entry, password, target)

        assert not target.exists()
        assert list(tmp_path.glob("*.tmp")) == []

    def test_existing_file_replaced(self, entry, password, tmp_path):
        target = tmp_path / "RDCManagerCertificate.pfx"
        target.write_bytes(b"stale")

        export_pfx(entry, password, target)

        assert pkcs12.load_pkcs12(target.read_bytes(), b"p@ssw0rd").cert is not None
