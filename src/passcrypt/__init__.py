# passcrypt: password-based text encryption
#
# AES-256-CBC + PBKDF2-HMAC-SHA256 behind a single base64 container,
# with typed wrappers for integers and other scalars.

__version__ = "1.0.0"
__author__ = "passcrypt maintainers"
__description__ = "Password-based AES encryption for text and typed values"

from .core import (
    DEFAULT_PASSWORD,
    Cipher,
    CipherContainer,
    CipherException,
    ConversionFailure,
    CryptographicFailure,
    InvalidArgument,
    MalformedInput,
    decrypt,
    encrypt,
    get_audit_logger,
)
from .settings import ApplicationSettings
from .typed_codecs import (
    ValueKind,
    decrypt_bool,
    decrypt_decimal,
    decrypt_float,
    decrypt_int,
    decrypt_long,
    decrypt_short,
    decrypt_string,
    decrypt_value,
    encrypt_bool,
    encrypt_decimal,
    encrypt_float,
    encrypt_int,
    encrypt_long,
    encrypt_short,
    encrypt_string,
    encrypt_value,
    escape_and_encrypt,
    parse_value,
    to_int,
    to_long,
    to_short,
    unescape_and_decrypt,
)

__all__ = [
    "__version__",
    # Engine
    "Cipher",
    "CipherContainer",
    "DEFAULT_PASSWORD",
    "encrypt",
    "decrypt",
    # Errors
    "CipherException",
    "InvalidArgument",
    "MalformedInput",
    "CryptographicFailure",
    "ConversionFailure",
    # Typed wrappers
    "ValueKind",
    "encrypt_value",
    "decrypt_value",
    "parse_value",
    "escape_and_encrypt",
    "unescape_and_decrypt",
    "encrypt_string",
    "decrypt_string",
    "encrypt_short",
    "decrypt_short",
    "encrypt_int",
    "decrypt_int",
    "encrypt_long",
    "decrypt_long",
    "encrypt_bool",
    "decrypt_bool",
    "encrypt_float",
    "decrypt_float",
    "encrypt_decimal",
    "decrypt_decimal",
    "to_short",
    "to_int",
    "to_long",
    # Settings / logging
    "ApplicationSettings",
    "get_audit_logger",
]
