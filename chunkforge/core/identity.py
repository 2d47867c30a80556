"""Identity codec — reversible filename <-> storage key mapping.

An identity is the unpadded URL-safe base64 encoding of the UTF-8 bytes of
the original filename.  Its alphabet is ``[A-Za-z0-9_-]``, so it can be
used unescaped as a URL path segment and as a single path component.

Decoding is strict: every identity decodes to exactly one name and every
name encodes to exactly one identity.
"""

from __future__ import annotations

import base64
import binascii
import re

from chunkforge.core.errors import InvalidIdentityError

IDENTITY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def encode(original_name: str) -> str:
    """Encode *original_name* into its identity."""
    if not original_name:
        raise InvalidIdentityError("File name must not be empty")
    raw = original_name.encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def is_valid_identity(identity: str) -> bool:
    """Whether *identity* is shaped like an identity (alphabet and length).

    This is the check used for raw chunk-directory keys; it does not
    require the payload to decode to text.
    """
    return bool(IDENTITY_PATTERN.fullmatch(identity)) and len(identity) % 4 != 1


def decode(identity: str) -> str:
    """Decode *identity* back to the original filename.

    Raises
    ------
    InvalidIdentityError
        If the identity is not canonical unpadded URL-safe base64, or the
        decoded bytes are not valid UTF-8.
    """
    if not is_valid_identity(identity):
        raise InvalidIdentityError("Invalid file name encoding")

    padded = identity + "=" * (-len(identity) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as exc:
        raise InvalidIdentityError("Invalid file name encoding") from exc

    # Reject aliases that differ only in the unused trailing bits.
    if base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=") != identity:
        raise InvalidIdentityError("Invalid file name encoding")

    try:
        name = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidIdentityError("Failed to decode file name") from exc

    if not name:
        raise InvalidIdentityError("Failed to decode file name")
    return name
