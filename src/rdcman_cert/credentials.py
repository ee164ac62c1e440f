# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""
Password inputs for PFX export and import.

A password arrives either as plain text or already protected. Both are
normalized to ProtectedPassword, which keeps the secret inside a pydantic
SecretStr so it never shows up in reprs, tracebacks or log records.
"""

from dataclasses import dataclass
from typing import Union

from pydantic import SecretStr

from .exceptions import CredentialError


@dataclass(frozen=True)
class PlainTextPassword:
    """Password supplied as plain text."""
    value: str

    def __repr__(self) -> str:
        return "PlainTextPassword('**********')"


@dataclass(frozen=True)
class ProtectedPassword:
    """Password held as a SecretStr."""
    secret: SecretStr

    def as_bytes(self) -> bytes:
        """Reveal the password for PKCS#12 encryption."""
        return self.secret.get_secret_value().encode("utf-8")


PasswordInput = Union[PlainTextPassword, ProtectedPassword]


def protect_password(password_input: PasswordInput) -> ProtectedPassword:
    """
    Normalize a password input into protected form.

    Args:
        password_input: Plain text or already protected password

    Returns:
        ProtectedPassword

    Raises:
        CredentialError: If the input is empty or of an unknown kind
    """
    if isinstance(password_input, ProtectedPassword):
        protected = password_input
    elif isinstance(password_input, PlainTextPassword):
        if not isinstance(password_input.value, str):
            raise CredentialError("Plain-text password must be a string")
        protected = ProtectedPassword(SecretStr(password_input.value))
    else:
        raise CredentialError(
            f"Unsupported password input: {type(password_input).__name__}"
        )

    if not protected.secret.get_secret_value():
        raise CredentialError("Password must not be empty")

    return protected
