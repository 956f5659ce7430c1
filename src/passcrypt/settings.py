"""
Application settings that keep their secret encrypted at rest.

Only the base64 container is held; the plaintext password is produced by
decrypting on every read. Values come from explicit arguments first, then
the environment (optionally seeded from a .env file):

    PASSCRYPT_ENCRYPTION_PASSWORD   blob of the application's encryption password
    PASSCRYPT_MASTER_PASSWORD       password that blob was sealed with
                                    (DEFAULT_PASSWORD when unset)
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .core.cipher import Cipher
from .core.exceptions import InvalidArgument

logger = logging.getLogger(__name__)

ENV_ENCRYPTION_PASSWORD = "PASSCRYPT_ENCRYPTION_PASSWORD"
ENV_MASTER_PASSWORD = "PASSCRYPT_MASTER_PASSWORD"


class ApplicationSettings:
    """Holds the application's encryption password as a cipher blob."""

    def __init__(self, encrypted_password: Optional[str] = None, master_password: Optional[str] = None):
        self._encrypted_password = encrypted_password
        self._master_cipher = Cipher(master_password)

    @property
    def encrypted_password(self) -> Optional[str]:
        """The stored blob, exactly as configured."""
        return self._encrypted_password

    @property
    def encryption_password(self) -> Optional[str]:
        """Decrypted on every read; None when nothing is configured."""
        if self._encrypted_password is None:
            return None
        return self._master_cipher.decrypt(self._encrypted_password)

    @encryption_password.setter
    def encryption_password(self, blob: Optional[str]) -> None:
        # Takes the already-encrypted blob, like the value read from config
        self._encrypted_password = blob

    def seal_encryption_password(self, password: str) -> str:
        """Encrypt ``password`` with the master password and store the blob."""
        self._encrypted_password = self._master_cipher.encrypt(password)
        return self._encrypted_password

    def cipher(self) -> Cipher:
        """Cipher keyed with the decrypted encryption password.

        Raises:
            InvalidArgument: No encryption password configured.
        """
        password = self.encryption_password
        if not password:
            raise InvalidArgument("No encryption password configured.")
        return Cipher(password)

    @classmethod
    def from_env(
        cls,
        dotenv_path: Optional[Union[str, Path]] = None,
        encrypted_password: Optional[str] = None,
        master_password: Optional[str] = None,
    ) -> "ApplicationSettings":
        """
        Build settings from arguments, falling back to the environment.

        Args:
            dotenv_path: .env file to load first (existing variables win)
            encrypted_password: Blob (env: PASSCRYPT_ENCRYPTION_PASSWORD)
            master_password: Sealing password (env: PASSCRYPT_MASTER_PASSWORD)
        """
        if dotenv_path is not None:
            loaded = load_dotenv(dotenv_path, override=False)
            logger.debug("Loaded settings from %s: %s", dotenv_path, loaded)

        encrypted_password = encrypted_password or os.getenv(ENV_ENCRYPTION_PASSWORD) or None
        master_password = master_password or os.getenv(ENV_MASTER_PASSWORD) or None

        if encrypted_password is None:
            logger.warning("%s is not set; no encryption password configured", ENV_ENCRYPTION_PASSWORD)

        return cls(encrypted_password=encrypted_password, master_password=master_password)
