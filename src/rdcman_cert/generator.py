# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Self-signed certificate generation.

RDCMan encrypts stored passwords with the public key of a certificate from
the user's store, so the certificate needs a key-exchange capable key (key
and data encipherment) and an exportable private key to be usable on more
than one machine.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from .exceptions import CertificateGenerationError, StoreError
from .store import CertificateStore, StoredCertificate

logger = logging.getLogger(__name__)


def add_years(moment: datetime, years: int) -> datetime:
    """Shift by calendar years; 29 February falls back to 28 February."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


class SelfSignedCertificateGenerator:
    """Create self-signed key-exchange certificates in a certificate store."""

    def __init__(self, store: CertificateStore, key_size: int = 2048):
        self.store = store
        self.key_size = key_size

    def build(
        self,
        subject: str,
        validity_years: int,
        now: Optional[datetime] = None,
    ) -> Tuple[x509.Certificate, rsa.RSAPrivateKey]:
        """
        Build a self-signed certificate and its key without storing them.

        Args:
            subject: Subject (and issuer) common name
            validity_years: Years until expiry
            now: Start of validity (default: current UTC time)

        Returns:
            Tuple of (certificate, private_key)

        Raises:
            ValueError: If the subject is empty or expiry precedes `now`
        """
        if not subject:
            raise ValueError("Subject must not be empty")

        if now is None:
            now = datetime.now(timezone.utc)

        private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=self.key_size,
        )

        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, subject)])

        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(private_key.public_key())
            .serial_number(x509.random_serial_number())
            .not_valid_before(now)
            .not_valid_after(add_years(now, validity_years))
            .add_extension(
                x509.BasicConstraints(ca=False, path_length=None),
                critical=True,
            )
            .add_extension(
                x509.KeyUsage(
                    digital_signature=False,
                    content_commitment=False,
                    key_encipherment=True,
                    data_encipherment=True,
                    key_agreement=False,
                    key_cert_sign=False,
                    crl_sign=False,
                    encipher_only=False,
                    decipher_only=False,
                ),
                critical=False,
            )
            .add_extension(
                x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
                critical=False,
            )
            .sign(private_key, hashes.SHA256())
        )

        return cert, private_key

    def generate(
        self,
        subject: str,
        validity_years: int,
        exportable: bool = True,
    ) -> StoredCertificate:
        """
        Generate a certificate and add it to the store.

        Args:
            subject: Subject common name
            validity_years: Years until expiry
            exportable: Mark the private key exportable

        Returns:
            The new store entry

        Raises:
            CertificateGenerationError: If building or storing fails
        """
        logger.debug(
            f"Generating self-signed certificate CN={subject} "
            f"(RSA {self.key_size}, {validity_years} years)"
        )
        try:
            cert, private_key = self.build(subject, validity_years)
            entry = self.store.add(cert, private_key, exportable=exportable)
        except (ValueError, TypeError, OverflowError, StoreError) as e:
            raise CertificateGenerationError(
                f"Failed to generate certificate CN={subject}: {e}"
            ) from e

        logger.info(f"Created certificate {entry.thumbprint} (CN={subject})")
        logger.debug(f"Valid until: {entry.not_valid_after.isoformat()}")
        return entry
