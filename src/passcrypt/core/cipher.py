"""Password-based text encryption using AES-256-CBC with PBKDF2 key derivation.

- PBKDF2-SHA256 (10k iterations) derives a 256-bit key from password + salt
- AES-256-CBC with PKCS7 padding encrypts the UTF-8 plaintext
- Random 16-byte salt + 16-byte IV per call, never reused

Output: base64(salt(16) + iv(16) + ciphertext), see container.py.
"""

import logging
import os
from typing import Optional

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher as BlockCipher
from cryptography.hazmat.primitives.ciphers import algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .audit_log import CipherEventType, get_audit_logger
from .container import BLOCK_SIZE, IV_LENGTH, SALT_LENGTH, CipherContainer
from .exceptions import CryptographicFailure, InvalidArgument, MalformedInput

logger = logging.getLogger(__name__)

# Weak, well-known fallback. Only meant for non-production defaults; real
# deployments pass their own password (see passcrypt.settings).
DEFAULT_PASSWORD = "p@55w0rd@SMACipher"


class Cipher:
    """
    Encrypt/decrypt text with a password.

    The password given at construction (or DEFAULT_PASSWORD) is used by
    encrypt/decrypt unless a call passes its own. It cannot be changed
    afterwards; build a new Cipher instead.

    Flow:
    1. Fresh salt + IV from os.urandom
    2. PBKDF2 derives the 256-bit key from password + salt
    3. AES-256-CBC encrypts the padded plaintext
    4. salt + IV + ciphertext are packed and base64-encoded
    """

    PBKDF2_ITERATIONS = 10_000
    KEY_LENGTH = 32  # 256 bits for AES-256

    __slots__ = ("_password",)

    def __init__(self, password: Optional[str] = None):
        self._password = DEFAULT_PASSWORD if password is None else password

    def __repr__(self) -> str:
        return f"{type(self).__name__}(password=***)"

    @property
    def password(self) -> str:
        return self._password

    @staticmethod
    def derive_key(password: str, salt: bytes) -> bytes:
        """Derive a 256-bit key from password + salt via PBKDF2-SHA256."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=Cipher.KEY_LENGTH,
            salt=salt,
            iterations=Cipher.PBKDF2_ITERATIONS,
            backend=default_backend(),
        )
        return kdf.derive(password.encode("utf-8"))

    def _effective_password(self, password: Optional[str]) -> str:
        effective = self._password if password is None else password
        if not effective:
            get_audit_logger().log_cipher_event(
                CipherEventType.INVALID_ARGUMENT,
                "Password cannot be empty",
                details={"explicit_password": password is not None},
            )
            raise InvalidArgument("Password cannot be empty.")
        return effective

    def encrypt(self, plaintext: Optional[str], password: Optional[str] = None) -> str:
        """
        Encrypt text and return the base64 container.

        Args:
            plaintext: Text to encrypt. None is treated as "".
            password: Overrides the instance password for this call.

        Returns:
            base64(salt + iv + ciphertext). Never the same twice.

        Raises:
            InvalidArgument: Effective password is empty.
        """
        effective = self._effective_password(password)
        data = (plaintext or "").encode("utf-8")

        salt = os.urandom(SALT_LENGTH)
        iv = os.urandom(IV_LENGTH)
        key = self.derive_key(effective, salt)

        padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
        padded = padder.update(data) + padder.finalize()

        encryptor = BlockCipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).encryptor()
        payload = encryptor.update(padded) + encryptor.finalize()

        blob = CipherContainer(salt=salt, iv=iv, payload=payload).to_base64()
        logger.debug("Encrypted %d bytes into %d-char container", len(data), len(blob))
        get_audit_logger().log_cipher_event(
            CipherEventType.ENCRYPTED,
            "Text encrypted",
            details={"plaintext_bytes": len(data), "blob_length": len(blob)},
        )
        return blob

    def decrypt(self, blob: str, password: Optional[str] = None) -> str:
        """
        Decrypt a base64 container produced by encrypt().

        Raises:
            InvalidArgument: Effective password is empty.
            MalformedInput: Not base64, or too short to hold salt + IV + one block.
            CryptographicFailure: Wrong password or corrupt data.
        """
        effective = self._effective_password(password)

        try:
            container = CipherContainer.from_base64(blob)
        except MalformedInput as exc:
            get_audit_logger().log_cipher_event(
                CipherEventType.MALFORMED_INPUT,
                str(exc),
                details={"blob_length": len(blob) if isinstance(blob, (str, bytes)) else None},
            )
            raise

        key = self.derive_key(effective, container.salt)
        decryptor = BlockCipher(algorithms.AES(key), modes.CBC(container.iv), backend=default_backend()).decryptor()
        padded = decryptor.update(container.payload) + decryptor.finalize()

        try:
            unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
            data = unpadder.update(padded) + unpadder.finalize()
            plaintext = data.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            get_audit_logger().log_cipher_event(
                CipherEventType.DECRYPT_FAILED,
                "Decryption rejected: wrong password or corrupt data",
                details={"payload_bytes": len(container.payload), "reason": type(exc).__name__},
            )
            raise CryptographicFailure(
                "Decryption failed: wrong password or corrupt data."
            ) from exc

        logger.debug("Decrypted %d-byte payload", len(container.payload))
        get_audit_logger().log_cipher_event(
            CipherEventType.DECRYPTED,
            "Text decrypted",
            details={"payload_bytes": len(container.payload)},
        )
        return plaintext


def encrypt(plaintext: Optional[str], password: Optional[str] = None) -> str:
    """Encrypt with a throwaway Cipher (DEFAULT_PASSWORD when password is None)."""
    return Cipher(password).encrypt(plaintext)


def decrypt(blob: str, password: Optional[str] = None) -> str:
    """Decrypt with a throwaway Cipher (DEFAULT_PASSWORD when password is None)."""
    return Cipher(password).decrypt(blob)
