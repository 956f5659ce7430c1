"""Ciphertext container: salt + IV + AES-CBC payload, base64 for transport.

Layout: salt(16) + iv(16) + payload(n * 16)

The container carries no algorithm identifier, version tag or
authentication tag. Readers always assume PBKDF2-HMAC-SHA256 (10000
iterations) and AES-256-CBC with PKCS7 padding, so a wrong password is only
detected through padding validation, which is a weak integrity signal.
The layout is kept as is to stay compatible with blobs already in storage.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Union

from .exceptions import MalformedInput

SALT_LENGTH = 16   # 128-bit salt
BLOCK_SIZE = 16    # AES block size in bytes, also the IV length
IV_LENGTH = BLOCK_SIZE

# Minimum header size: salt + IV
HEADER_SIZE = SALT_LENGTH + IV_LENGTH

# Characters dropped before decoding (line-wrapped or padded transport)
_WHITESPACE_BYTES = b" \t\r\n"
_WHITESPACE_TABLE = dict.fromkeys(_WHITESPACE_BYTES)


@dataclass(frozen=True)
class CipherContainer:
    """One encrypted value as stored or transmitted."""

    salt: bytes
    iv: bytes
    payload: bytes

    def __post_init__(self):
        if len(self.salt) != SALT_LENGTH:
            raise MalformedInput(f"Salt must be {SALT_LENGTH} bytes, got {len(self.salt)}.")
        if len(self.iv) != IV_LENGTH:
            raise MalformedInput(f"IV must be {IV_LENGTH} bytes, got {len(self.iv)}.")
        if not self.payload or len(self.payload) % BLOCK_SIZE != 0:
            raise MalformedInput(
                f"Encrypted payload must be a non-empty multiple of {BLOCK_SIZE} bytes, "
                f"got {len(self.payload)}."
            )

    def to_bytes(self) -> bytes:
        return self.salt + self.iv + self.payload

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_bytes(cls, blob: bytes) -> "CipherContainer":
        """Split a raw container into its parts.

        Raises:
            MalformedInput: Blob too short to contain the header, or the
                payload is not block aligned.
        """
        if len(blob) < HEADER_SIZE:
            raise MalformedInput(
                f"Encrypted data too short to be a valid container "
                f"({len(blob)} bytes, need at least {HEADER_SIZE})."
            )
        return cls(
            salt=bytes(blob[:SALT_LENGTH]),
            iv=bytes(blob[SALT_LENGTH:HEADER_SIZE]),
            payload=bytes(blob[HEADER_SIZE:]),
        )

    @classmethod
    def from_base64(cls, text: Union[str, bytes]) -> "CipherContainer":
        """
        Decode base64 text into a container.

        ASCII whitespace (space, tab, CR, LF) is dropped first so blobs that
        were line-wrapped in transit still open; any other character outside
        the base64 alphabet is rejected.
        """
        if isinstance(text, str):
            text = text.translate(_WHITESPACE_TABLE)
        elif isinstance(text, (bytes, bytearray)):
            text = bytes(text).translate(None, _WHITESPACE_BYTES)
        else:
            raise MalformedInput(f"Ciphertext must be text, not {type(text).__name__}.")
        try:
            raw = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedInput(f"Ciphertext is not valid base64: {exc}") from exc
        return cls.from_bytes(raw)
