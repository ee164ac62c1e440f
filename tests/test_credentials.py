# SPDX-License-Identifier: Apache-2.0
# Copyright (C) 2024-2026 The Birthmark Standard Foundation

"""Tests for password normalization."""

import pytest
from pydantic import SecretStr

from rdcman_cert.credentials import PlainTextPassword, ProtectedPassword, protect_password
from rdcman_cert.exceptions import CredentialError


class TestProtectPassword:
    """Test conversion of password inputs to protected form."""

    def test_plain_text_converted(self):
        protected = protect_password(PlainTextPassword("p@ssw0rd"))

        assert isinstance(protected, ProtectedPassword)
        assert isinstance(protected.secret, SecretStr)
        assert protected.as_bytes() == b"p@ssw0rd"

    def test_protected_passed_through(self):
        original = ProtectedPassword(SecretStr("s3cret"))
        assert protect_password(original) is original

    def test_empty_password_rejected(self):
        with pytest.raises(CredentialError):
            protect_password(PlainTextPassword(""))

    def test_empty_protected_password_rejected(self):
        with pytest.raises(CredentialError):
            protect_password(ProtectedPassword(SecretStr("")))

    def test_unknown_input_rejected(self):
        with pytest.raises(CredentialError):
            protect_password("p@ssw0rd")

    def test_secret_not_in_repr(self):
        """Neither input variant shows the password."""
        assert "p@ssw0rd" not in repr(PlainTextPassword("p@ssw0rd"))
        assert "p@ssw0rd" not in repr(protect_password(PlainTextPassword("p@ssw0rd")))

    def test_unicode_password_encoded_as_utf8(self):
        protected = protect_password(PlainTextPassword("pässwörd"))
        assert protected.as_bytes() == "pässwörd".encode("utf-8")
