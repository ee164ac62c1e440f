# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Exception hierarchy for RDCMan certificate provisioning.

ProvisioningError and its subclasses abort a provisioning run. Store and
PFX errors are raised by the lower layers and are either recovered from by
the provisioner or re-raised as one of the fatal errors.
"""


class ProvisioningError(Exception):
    """Base class for errors that abort a provisioning run."""
    pass


class ExportDirectoryError(ProvisioningError):
    """Export directory could not be created."""
    pass


class InvalidCertificateNameError(ProvisioningError):
    """Certificate name yields an empty subject."""
    pass


class CredentialError(ProvisioningError):
    """Password could not be converted to a protected credential."""
    pass


class CertificateGenerationError(ProvisioningError):
    """Self-signed certificate could not be generated."""
    pass


class ExportCleanupError(ProvisioningError):
    """An unimportable exported file could not be deleted."""
    pass


class StoreError(Exception):
    """Local certificate store operation failed."""
    pass


class CertificateNotFoundError(StoreError):
    """No store entry matches the requested thumbprint."""
    pass


class PfxError(Exception):
    """PKCS#12 export or import failed."""
    pass


class ExportNotAllowedError(PfxError):
    """Private key of the store entry is not marked exportable."""
    pass
