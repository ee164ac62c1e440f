# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
RDCMan Certificate Provisioning

Creates the self-signed certificate RDCMan uses to encrypt stored
passwords, exports it to a PFX file and verifies the file re-imports.
"""

__version__ = "1.0.0"

from .config import Settings

from .credentials import (
    PlainTextPassword,
    ProtectedPassword,
    protect_password,
)

from .exceptions import (
    ProvisioningError,
    ExportDirectoryError,
    InvalidCertificateNameError,
    CredentialError,
    CertificateGenerationError,
    ExportCleanupError,
    StoreError,
    CertificateNotFoundError,
    PfxError,
    ExportNotAllowedError,
)

from .store import (
    CertificateStore,
    StoredCertificate,
)

from .provisioner import (
    CertificateProvisioner,
    ProvisioningReport,
    ProvisioningState,
)

__all__ = [
    # Configuration
    "Settings",
    # Credentials
    "PlainTextPassword",
    "ProtectedPassword",
    "protect_password",
    # Errors
    "ProvisioningError",
    "ExportDirectoryError",
    "InvalidCertificateNameError",
    "CredentialError",
    "CertificateGenerationError",
    "ExportCleanupError",
    "StoreError",
    "CertificateNotFoundError",
    "PfxError",
    "ExportNotAllowedError",
    # Store
    "CertificateStore",
    "StoredCertificate",
    # Provisioning
    "CertificateProvisioner",
    "ProvisioningReport",
    "ProvisioningState",
]
