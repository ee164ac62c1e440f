# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Subject and export file naming.

The certificate name doubles as subject and file base name. Only the first
dot-delimited segment is kept, so "RDCManagerCertificate.pfx" and
"RDCManagerCertificate" both produce the subject "RDCManagerCertificate".
"""

from pathlib import Path
from typing import Union

PFX_EXTENSION = ".pfx"


def derive_subject_name(certificate_name: str) -> str:
    """
    Strip everything from the first '.' onwards.

    Args:
        certificate_name: Configured certificate name

    Returns:
        Subject common name

    Raises:
        ValueError: If nothing usable remains
    """
    subject = certificate_name.split(".", 1)[0].strip()
    if not subject:
        raise ValueError(f"Invalid certificate name: {certificate_name!r}")
    return subject


def export_file_name(subject: str) -> str:
    """File name of the exported container for a subject."""
    return f"{subject}{PFX_EXTENSION}"


def export_path(export_folder: Union[str, Path], certificate_name: str) -> Path:
    """Full path of the exported container: <export_folder>/<subject>.pfx"""
    return Path(export_folder) / export_file_name(derive_subject_name(certificate_name))
