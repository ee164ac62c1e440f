# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
RDCMan Certificate - Main CLI Application

Provisions the certificate RDCMan uses to encrypt stored passwords and
manages the local certificate store.
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, ValidationError

from .config import Settings
from .credentials import PasswordInput, PlainTextPassword, ProtectedPassword
from .exceptions import ProvisioningError, StoreError
from .provisioner import CertificateProvisioner
from .store import CertificateStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rdcman-cert',
        description='Create and verify the RDCMan password encryption certificate',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Provision with the default name, password and folder
  python -m rdcman_cert provision

  # Custom name and folder, 10 year validity
  python -m rdcman_cert provision --name Team.pfx --export-folder ./certs --validity-years 10

  # Prompt for the password instead of passing it on the command line
  python -m rdcman_cert provision --secure-password

  # Show certificates in the local store
  python -m rdcman_cert list

  # Delete a certificate from the local store
  python -m rdcman_cert remove 3F2A...
        """
    )

    parser.add_argument(
        '--store',
        type=Path,
        help='Local certificate store directory (default: ~/.rdcman_cert/store)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    provision = subparsers.add_parser('provision', help='Create, export and verify the certificate')
    provision.add_argument(
        '--name',
        help='Certificate name; text after the first "." is ignored (default: RDCManagerCertificate)'
    )

    password_group = provision.add_mutually_exclusive_group()
    password_group.add_argument(
        '--password',
        help='Plain-text PFX password (default: p@ssw0rd)'
    )
    password_group.add_argument(
        '--secure-password',
        action='store_true',
        help='Prompt for the PFX password without echoing it'
    )

    provision.add_argument(
        '--export-folder',
        type=Path,
        help='Directory for the exported PFX (default: C:\\Test or ~/Test)'
    )
    provision.add_argument(
        '--validity-years',
        type=int,
        help='Certificate validity in years (default: 5)'
    )

    subparsers.add_parser('list', help='List certificates in the local store')

    remove = subparsers.add_parser('remove', help='Delete a certificate from the local store')
    remove.add_argument('thumbprint', help='SHA-1 thumbprint of the certificate')

    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Merge command line overrides over environment settings."""
    overrides = {}
    if args.store is not None:
        overrides['store_path'] = args.store
    if args.verbose:
        overrides['log_level'] = 'DEBUG'

    if args.command == 'provision':
        if args.name is not None:
            overrides['certificate_name'] = args.name
        if args.export_folder is not None:
            overrides['export_folder'] = args.export_folder
        if args.validity_years is not None:
            overrides['validity_years'] = args.validity_years

    return Settings(**overrides)


def read_password(args: argparse.Namespace) -> Optional[PasswordInput]:
    """Password input selected on the command line, or None for the configured one."""
    if args.secure_password:
        return ProtectedPassword(SecretStr(getpass.getpass('PFX password: ')))
    if args.password is not None:
        return PlainTextPassword(args.password)
    return None


def cmd_provision(settings: Settings, args: argparse.Namespace) -> int:
    provisioner = CertificateProvisioner(settings)
    report = provisioner.run(read_password(args))

    if report.succeeded:
        print(f"✓ Certificate CN={report.subject} provisioned")
        print(f"  Thumbprint: {report.imported_thumbprint}")
        print(f"  Export: {report.export_path}")
    else:
        print(f"⚠ Provisioning stopped at: {report.state.value}")
    return 0


def cmd_list(settings: Settings) -> int:
    store = CertificateStore(settings.store_path)
    entries = store.list()
    if not entries:
        print(f"No certificates in {store.root}")
        return 0

    for entry in entries:
        expiry = entry.not_valid_after.strftime('%Y-%m-%d')
        exportable = 'exportable' if entry.exportable else 'not exportable'
        print(f"{entry.thumbprint}  CN={entry.subject}  expires {expiry}  ({exportable})")
    return 0


def cmd_remove(settings: Settings, thumbprint: str) -> int:
    store = CertificateStore(settings.store_path)
    store.remove(thumbprint)
    print(f"✓ Removed {thumbprint.upper()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level)

    try:
        if args.command == 'provision':
            code = cmd_provision(settings, args)
        elif args.command == 'list':
            code = cmd_list(settings)
        else:
            code = cmd_remove(settings, args.thumbprint)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(1)

    except (ProvisioningError, StoreError) as e:
        logger.error(str(e))
        if args.verbose:
            logger.debug("Traceback:", exc_info=True)
        sys.exit(1)

    return code


if __name__ == "__main__":
    sys.exit(main())
