# Core module: the cipher engine and what it shares with the wrappers.
#
# - Cipher engine (PBKDF2 + AES-256-CBC)
# - Ciphertext container format
# - Exception taxonomy
# - Audit logging

from .audit_log import (
    AuditLogger,
    CipherEventType,
    EventSeverity,
    get_audit_logger,
    log_cipher_event,
)
from .cipher import DEFAULT_PASSWORD, Cipher, decrypt, encrypt
from .container import BLOCK_SIZE, HEADER_SIZE, IV_LENGTH, SALT_LENGTH, CipherContainer
from .exceptions import (
    CipherException,
    ConversionFailure,
    CryptographicFailure,
    InvalidArgument,
    MalformedInput,
)

__all__ = [
    # Cipher engine
    "Cipher",
    "DEFAULT_PASSWORD",
    "encrypt",
    "decrypt",
    # Container
    "CipherContainer",
    "SALT_LENGTH",
    "IV_LENGTH",
    "BLOCK_SIZE",
    "HEADER_SIZE",
    # Exceptions
    "CipherException",
    "InvalidArgument",
    "MalformedInput",
    "CryptographicFailure",
    "ConversionFailure",
    # Audit logging
    "AuditLogger",
    "CipherEventType",
    "EventSeverity",
    "get_audit_logger",
    "log_cipher_event",
]
