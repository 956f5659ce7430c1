"""
Typed encrypt/decrypt wrappers on top of the cipher engine.

A value is rendered to its canonical text, encrypted with Cipher, and on the
way back decrypted and parsed strictly into the requested kind. The set of
kinds is closed (ValueKind); each kind has exactly one formatter and one
parser.

Cryptographic errors from the engine propagate unchanged. ConversionFailure
is only raised for values that do not fit their kind.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import quote, unquote

from .core.audit_log import CipherEventType, get_audit_logger
from .core.cipher import Cipher
from .core.exceptions import ConversionFailure

logger = logging.getLogger(__name__)


class ValueKind(str, Enum):
    """Value types that can be encrypted and decrypted back."""
    TEXT = "text"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    BOOLEAN = "bool"
    FLOAT = "float"
    DECIMAL = "decimal"


INT_RANGES: Dict[ValueKind, Tuple[int, int]] = {
    ValueKind.INT16: (-(2 ** 15), 2 ** 15 - 1),
    ValueKind.INT32: (-(2 ** 31), 2 ** 31 - 1),
    ValueKind.INT64: (-(2 ** 63), 2 ** 63 - 1),
}

# ASCII digits only: int() would also accept "1_000" and non-Latin digits
_INT_LITERAL = re.compile(r"[+-]?[0-9]+")
_FLOAT_LITERAL = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE | re.ASCII,
)


# ── Formatting ─────────────────────────────────────────────────────


def _format_text(value: Any, kind: ValueKind) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConversionFailure(f"Expected str for {kind.value}, got {type(value).__name__}.")
    return value


def _format_int(value: Any, kind: ValueKind) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConversionFailure(f"Expected int for {kind.value}, got {type(value).__name__}.")
    low, high = INT_RANGES[kind]
    if not low <= value <= high:
        raise ConversionFailure(f"{value} is out of range for {kind.value} ({low}..{high}).")
    return str(value)


def _format_bool(value: Any, kind: ValueKind) -> str:
    if not isinstance(value, bool):
        raise ConversionFailure(f"Expected bool, got {type(value).__name__}.")
    return "True" if value else "False"


def _format_float(value: Any, kind: ValueKind) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConversionFailure(f"Expected float, got {type(value).__name__}.")
    return repr(float(value))


def _format_decimal(value: Any, kind: ValueKind) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise ConversionFailure(f"Expected Decimal, got {type(value).__name__}.")
    value = Decimal(value)
    if not value.is_finite():
        raise ConversionFailure(f"Decimal value must be finite, got {value}.")
    return str(value)


_FORMATTERS: Dict[ValueKind, Callable[[Any, ValueKind], str]] = {
    ValueKind.TEXT: _format_text,
    ValueKind.INT16: _format_int,
    ValueKind.INT32: _format_int,
    ValueKind.INT64: _format_int,
    ValueKind.BOOLEAN: _format_bool,
    ValueKind.FLOAT: _format_float,
    ValueKind.DECIMAL: _format_decimal,
}


def format_value(value: Any, kind: ValueKind) -> str:
    """Render a value as the canonical text that gets encrypted."""
    return _FORMATTERS[ValueKind(kind)](value, ValueKind(kind))


# ── Parsing ────────────────────────────────────────────────────────


def _parse_text(text: str, kind: ValueKind) -> str:
    return text


def _parse_int(text: str, kind: ValueKind) -> int:
    stripped = text.strip()
    if not _INT_LITERAL.fullmatch(stripped):
        raise ConversionFailure(f"{text!r} is not a valid {kind.value} literal.")
    value = int(stripped)
    low, high = INT_RANGES[kind]
    if not low <= value <= high:
        raise ConversionFailure(f"{value} is out of range for {kind.value} ({low}..{high}).")
    return value


def _parse_bool(text: str, kind: ValueKind) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ConversionFailure(f"{text!r} is not a valid bool literal.")


def _parse_float(text: str, kind: ValueKind) -> float:
    """Surrounding whitespace allowed; ASCII digits, exponent, inf or nan only."""
    stripped = text.strip()
    if not _FLOAT_LITERAL.fullmatch(stripped):
        raise ConversionFailure(f"{text!r} is not a valid float literal.")
    return float(stripped)


def _parse_decimal(text: str, kind: ValueKind) -> Decimal:
    try:
        value = Decimal(text.strip())
    except InvalidOperation as exc:
        raise ConversionFailure(f"{text!r} is not a valid decimal literal.") from exc
    if not value.is_finite():
        raise ConversionFailure(f"{text!r} is not a finite decimal.")
    return value


_PARSERS: Dict[ValueKind, Callable[[str, ValueKind], Any]] = {
    ValueKind.TEXT: _parse_text,
    ValueKind.INT16: _parse_int,
    ValueKind.INT32: _parse_int,
    ValueKind.INT64: _parse_int,
    ValueKind.BOOLEAN: _parse_bool,
    ValueKind.FLOAT: _parse_float,
    ValueKind.DECIMAL: _parse_decimal,
}


def parse_value(text: str, kind: ValueKind) -> Any:
    """Strictly parse decrypted text into ``kind``.

    Raises:
        ConversionFailure: ``text`` is not a valid literal of ``kind``.
    """
    return _PARSERS[ValueKind(kind)](text, ValueKind(kind))


# ── Encrypt / decrypt ──────────────────────────────────────────────


def encrypt_value(value: Any, kind: ValueKind, password: Optional[str] = None) -> str:
    """
    Encrypt a typed value.

    Args:
        value: Value matching ``kind``
        kind: Which ValueKind to render the value as
        password: Password to use (DEFAULT_PASSWORD when None)

    Returns:
        base64 container, as Cipher.encrypt

    Raises:
        ConversionFailure: Wrong type or out of range for ``kind``
        InvalidArgument: Empty password
    """
    text = format_value(value, kind)
    return Cipher(password).encrypt(text)


def decrypt_value(blob: str, kind: ValueKind, password: Optional[str] = None) -> Any:
    """
    Decrypt a blob and parse the plaintext into ``kind``.

    Raises:
        InvalidArgument, MalformedInput, CryptographicFailure: From the engine
        ConversionFailure: Decrypted text is not a valid ``kind`` literal
    """
    text = Cipher(password).decrypt(blob)
    try:
        return parse_value(text, kind)
    except ConversionFailure:
        get_audit_logger().log_cipher_event(
            CipherEventType.CONVERSION_FAILED,
            f"Decrypted text is not a valid {ValueKind(kind).value}",
            details={"kind": ValueKind(kind).value, "text_length": len(text)},
        )
        raise


def escape_and_encrypt(value: Any, kind: ValueKind, password: Optional[str] = None) -> str:
    """Encrypt and percent-encode the blob so it can travel in a URL."""
    return quote(encrypt_value(value, kind, password), safe="")


def unescape_and_decrypt(value: str, kind: ValueKind, password: Optional[str] = None) -> Any:
    """Percent-decode a blob taken from a URL, then decrypt it into ``kind``.

    ``+`` is left alone: it is a legal base64 character, not a space.
    """
    return decrypt_value(unquote(value), kind, password)


# Named wrappers

def encrypt_string(value: Optional[str], password: Optional[str] = None) -> str:
    return encrypt_value(value, ValueKind.TEXT, password)


def decrypt_string(blob: str, password: Optional[str] = None) -> str:
    return decrypt_value(blob, ValueKind.TEXT, password)


def encrypt_short(value: int, password: Optional[str] = None) -> str:
    return encrypt_value(value, ValueKind.INT16, password)


def decrypt_short(blob: str, password: Optional[str] = None) -> int:
    return decrypt_value(blob, ValueKind.INT16, password)


def encrypt_int(value: int, password: Optional[str] = None) -> str:
    return encrypt_value(value, ValueKind.INT32, password)


def decrypt_int(blob: str, password: Optional[str] = None) -> int:
    return decrypt_value(blob, ValueKind.INT32, password)


def encrypt_long(value: int, password: Optional[str] = None) -> str:
    return encrypt_value(value, ValueKind.INT64, password)


def decrypt_long(blob: str, password: Optional[str] = None) -> int:
    return decrypt_value(blob, ValueKind.INT64, password)


def encrypt_bool(value: bool, password: Optional[str] = None) -> str:
    return encrypt_value(value, ValueKind.BOOLEAN, password)


def decrypt_bool(blob: str, password: Optional[str] = None) -> bool:
    return decrypt_value(blob, ValueKind.BOOLEAN, password)


def encrypt_float(value: float, password: Optional[str] = None) -> str:
    return encrypt_value(value, ValueKind.FLOAT, password)


def decrypt_float(blob: str, password: Optional[str] = None) -> float:
    return decrypt_value(blob, ValueKind.FLOAT, password)


def encrypt_decimal(value: Decimal, password: Optional[str] = None) -> str:
    return encrypt_value(value, ValueKind.DECIMAL, password)


def decrypt_decimal(blob: str, password: Optional[str] = None) -> Decimal:
    return decrypt_value(blob, ValueKind.DECIMAL, password)


# Lenient parsers: 0 on anything that is not a valid in-range literal

def _to_int_or_zero(text: Optional[str], kind: ValueKind) -> int:
    if text is None:
        return 0
    try:
        return _parse_int(text, kind)
    except ConversionFailure:
        logger.debug("Lenient %s parse of %r fell back to 0", kind.value, text)
        return 0


def to_short(text: Optional[str]) -> int:
    return _to_int_or_zero(text, ValueKind.INT16)


def to_int(text: Optional[str]) -> int:
    return _to_int_or_zero(text, ValueKind.INT32)


def to_long(text: Optional[str]) -> int:
    return _to_int_or_zero(text, ValueKind.INT64)
