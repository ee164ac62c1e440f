# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
RDCMan certificate provisioning.

Handles the complete provisioning workflow:
1. Ensure the export directory exists
2. Derive subject name and export path
3. Protect the password
4. Generate the self-signed certificate in the local store
5. Export it to a password-protected PFX file
6. Remove it from the local store
7. Re-import it from the PFX file to prove the file is portable

Steps 1-4 raise on failure; nothing has been exported yet. Steps 5-7 are
recoverable: a failure is logged with an explanation, the later steps are
skipped and run() returns normally. The one exception is step 7's cleanup:
if an unimportable PFX cannot be deleted, ExportCleanupError is raised.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .config import Settings
from .credentials import (
    PasswordInput,
    PlainTextPassword,
    ProtectedPassword,
    protect_password,
)
from .exceptions import (
    ExportCleanupError,
    ExportDirectoryError,
    InvalidCertificateNameError,
    PfxError,
    StoreError,
)
from .generator import SelfSignedCertificateGenerator
from .naming import derive_subject_name, export_path
from .pfx import export_pfx, import_pfx
from .store import CertificateStore, StoredCertificate

logger = logging.getLogger(__name__)


class ProvisioningState(str, Enum):
    """Position of a run in the provisioning sequence."""

    STARTED = "started"
    DIRECTORY_READY = "directory_ready"
    NAME_COMPUTED = "name_computed"
    PASSWORD_READY = "password_ready"
    CERTIFICATE_CREATED = "certificate_created"
    EXPORTED = "exported"
    EXPORT_FAILED = "export_failed"
    REMOVED = "removed"
    REMOVE_FAILED = "remove_failed"
    IMPORTED = "imported"
    IMPORT_FAILED_FILE_DELETED = "import_failed_file_deleted"
    COMPLETED = "completed"


HALT_STATES = frozenset({
    ProvisioningState.EXPORT_FAILED,
    ProvisioningState.REMOVE_FAILED,
    ProvisioningState.IMPORT_FAILED_FILE_DELETED,
})


@dataclass
class ProvisioningReport:
    """Outcome of a provisioning run that did not raise."""

    subject: str = ""
    export_path: Optional[Path] = None
    certificate_thumbprint: Optional[str] = None
    imported_thumbprint: Optional[str] = None
    history: List[ProvisioningState] = field(
        default_factory=lambda: [ProvisioningState.STARTED]
    )

    @property
    def state(self) -> ProvisioningState:
        return self.history[-1]

    @property
    def succeeded(self) -> bool:
        return self.state is ProvisioningState.COMPLETED

    @property
    def halted(self) -> bool:
        """True when a recoverable failure stopped the run early."""
        return self.state in HALT_STATES

    def advance(self, state: ProvisioningState) -> None:
        self.history.append(state)
        logger.debug(f"State: {state.value}")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "state": self.state.value,
            "subject": self.subject,
            "export_path": str(self.export_path) if self.export_path else None,
            "certificate_thumbprint": self.certificate_thumbprint,
            "imported_thumbprint": self.imported_thumbprint,
            "history": [s.value for s in self.history],
        }


class CertificateProvisioner:
    """
    Create, export, remove and re-import an RDCMan certificate.

    The store and generator can be injected; by default they are built
    from the settings.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[CertificateStore] = None,
        generator: Optional[SelfSignedCertificateGenerator] = None,
    ):
        """
        Initialize provisioner.

        Args:
            settings: Provisioning settings (default: loaded from environment)
            store: Local certificate store (default: settings.store_path)
            generator: Certificate generator (default: RSA generator on `store`)
        """
        self.settings = settings or Settings()
        self.store = store or CertificateStore(self.settings.store_path)
        self.generator = generator or SelfSignedCertificateGenerator(
            self.store, key_size=self.settings.key_size
        )

    def run(self, password_input: Optional[PasswordInput] = None) -> ProvisioningReport:
        """
        Execute the provisioning sequence.

        Args:
            password_input: Plain text or protected password
                (default: settings.password as plain text)

        Returns:
            ProvisioningReport; check `succeeded` / `halted`

        Raises:
            ExportDirectoryError: Export directory could not be created
            InvalidCertificateNameError: Certificate name yields no subject
            CredentialError: Password could not be protected
            CertificateGenerationError: Certificate could not be generated
            ExportCleanupError: Unimportable PFX could not be deleted
        """
        report = ProvisioningReport()
        folder = Path(self.settings.export_folder).expanduser()

        # Step 1: Export directory
        self._ensure_directory(folder)
        report.advance(ProvisioningState.DIRECTORY_READY)

        # Step 2: Naming
        try:
            report.subject = derive_subject_name(self.settings.certificate_name)
        except ValueError as e:
            raise InvalidCertificateNameError(str(e)) from e
        report.export_path = export_path(folder, self.settings.certificate_name)
        logger.debug(f"Subject: CN={report.subject}")
        logger.debug(f"Export path: {report.export_path}")
        report.advance(ProvisioningState.NAME_COMPUTED)

        # Step 3: Password
        if password_input is None:
            password_input = PlainTextPassword(self.settings.password.get_secret_value())
        password = protect_password(password_input)
        logger.debug("Password converted to protected form")
        report.advance(ProvisioningState.PASSWORD_READY)

        # Step 4: Generate
        entry = self.generator.generate(
            report.subject,
            self.settings.validity_years,
            exportable=True,
        )
        report.certificate_thumbprint = entry.thumbprint
        report.advance(ProvisioningState.CERTIFICATE_CREATED)

        # Steps 5-7 short-circuit on the first recoverable failure
        if not self._export(entry, password, report):
            return report
        if not self._remove(entry, report):
            return report
        if not self._reimport(password, report):
            return report

        report.advance(ProvisioningState.COMPLETED)
        logger.info(
            f"Certificate CN={report.subject} provisioned; "
            f"copy {report.export_path} to other machines and import it there"
        )
        return report

    def _ensure_directory(self, folder: Path) -> None:
        if folder.is_dir():
            logger.debug(f"Export folder exists: {folder}")
            return

        logger.info(f"Export folder {folder} does not exist, creating it")
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportDirectoryError(f"Cannot create export folder {folder}: {e}") from e

    def _export(
        self,
        entry: StoredCertificate,
        password: ProtectedPassword,
        report: ProvisioningReport,
    ) -> bool:
        logger.info(f"Exporting certificate {entry.thumbprint} to {report.export_path}")
        try:
            export_pfx(entry, password, report.export_path)
        except PfxError as e:
            logger.error(f"Export failed: {e}")
            logger.warning(
                f"Certificate CN={report.subject} is still usable on this machine, "
                f"but it cannot be moved to another machine"
            )
            report.advance(ProvisioningState.EXPORT_FAILED)
            return False

        report.advance(ProvisioningState.EXPORTED)
        return True

    def _remove(self, entry: StoredCertificate, report: ProvisioningReport) -> bool:
        logger.info(f"Removing certificate {entry.thumbprint} from the local store")
        try:
            self.store.remove(entry.thumbprint)
        except StoreError as e:
            logger.error(f"Removal failed: {e}")
            logger.warning(
                f"Re-import of {report.export_path} cannot be verified; "
                f"the exported file has not been tested"
            )
            report.advance(ProvisioningState.REMOVE_FAILED)
            return False

        report.advance(ProvisioningState.REMOVED)
        return True

    def _reimport(self, password: ProtectedPassword, report: ProvisioningReport) -> bool:
        logger.info(f"Re-importing certificate from {report.export_path}")
        try:
            imported = import_pfx(report.export_path, password, self.store)
        except PfxError as e:
            logger.error(f"Import failed: {e}")
            logger.warning(f"Exported file {report.export_path} is unusable, deleting it")
            try:
                Path(report.export_path).unlink(missing_ok=True)
            except OSError as cleanup_error:
                raise ExportCleanupError(
                    f"Cannot delete unusable export {report.export_path}: {cleanup_error}"
                ) from cleanup_error
            report.advance(ProvisioningState.IMPORT_FAILED_FILE_DELETED)
            return False

        report.imported_thumbprint = imported.thumbprint
        report.advance(ProvisioningState.IMPORTED)
        return True
