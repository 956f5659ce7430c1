"""Tests for the typed encrypt/decrypt wrappers.

Covers: integer round trips at every width and boundary, range and type
checks, strict parsing, bool/float/decimal kinds, URL escaping, the lenient
to_* parsers, and how conversion errors layer on top of engine errors.
"""

import math
from decimal import Decimal

import pytest

from passcrypt.core.audit_log import CipherEventType
from passcrypt.core.cipher import Cipher
from passcrypt.core.exceptions import (
    ConversionFailure,
    CryptographicFailure,
    InvalidArgument,
    MalformedInput,
)
from passcrypt.typed_codecs import (
    INT_RANGES,
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
    format_value,
    parse_value,
    to_int,
    to_long,
    to_short,
    unescape_and_decrypt,
)

PASSWORD = "TypedP@ss123"

INT_KINDS = [ValueKind.INT16, ValueKind.INT32, ValueKind.INT64]


def _boundary_cases():
    for kind in INT_KINDS:
        low, high = INT_RANGES[kind]
        for value in (0, 1, -1, -12345, low, high):
            yield kind, value


# ── Integers ───────────────────────────────────────────────────────


class TestIntegerRoundTrip:

    @pytest.mark.parametrize("kind,value", list(_boundary_cases()))
    def test_roundtrip_with_password(self, kind, value):
        blob = encrypt_value(value, kind, PASSWORD)
        assert decrypt_value(blob, kind, PASSWORD) == value

    @pytest.mark.parametrize("kind", INT_KINDS)
    def test_roundtrip_default_password(self, kind):
        low, _ = INT_RANGES[kind]
        assert decrypt_value(encrypt_value(low, kind), kind) == low

    def test_named_wrappers(self):
        assert decrypt_short(encrypt_short(-32768, PASSWORD), PASSWORD) == -32768
        assert decrypt_int(encrypt_int(2147483647, PASSWORD), PASSWORD) == 2147483647
        assert decrypt_long(encrypt_long(-9223372036854775808)) == -9223372036854775808

    def test_ranges(self):
        assert INT_RANGES[ValueKind.INT16] == (-32768, 32767)
        assert INT_RANGES[ValueKind.INT32] == (-2147483648, 2147483647)
        assert INT_RANGES[ValueKind.INT64] == (-9223372036854775808, 9223372036854775807)

    def test_plaintext_is_decimal_text(self):
        blob = encrypt_int(-42, PASSWORD)
        assert Cipher(PASSWORD).decrypt(blob) == "-42"

    def test_wider_value_decrypts_into_wider_kind_only(self):
        blob = encrypt_int(70000, PASSWORD)
        assert decrypt_long(blob, PASSWORD) == 70000
        with pytest.raises(ConversionFailure):
            decrypt_short(blob, PASSWORD)


class TestIntegerValidation:

    @pytest.mark.parametrize("kind", INT_KINDS)
    def test_out_of_range_rejected_before_encrypting(self, kind):
        low, high = INT_RANGES[kind]
        with pytest.raises(ConversionFailure):
            encrypt_value(high + 1, kind, PASSWORD)
        with pytest.raises(ConversionFailure):
            encrypt_value(low - 1, kind, PASSWORD)

    @pytest.mark.parametrize("value", [True, 1.0, "1", None, Decimal(1)])
    def test_non_int_rejected(self, value):
        with pytest.raises(ConversionFailure):
            encrypt_int(value, PASSWORD)

    @pytest.mark.parametrize("text,expected", [
        ("42", 42),
        ("-42", -42),
        ("+42", 42),
        (" 42 ", 42),
        ("007", 7),
    ])
    def test_strict_parse_accepts(self, text, expected):
        assert parse_value(text, ValueKind.INT32) == expected

    @pytest.mark.parametrize("text", [
        "",
        "abc",
        "4_2",
        "4.0",
        "1e3",
        "٤٢",        # Arabic-Indic digits
        "0x10",
        "--1",
        "2147483648",
    ])
    def test_strict_parse_rejects(self, text):
        with pytest.raises(ConversionFailure):
            parse_value(text, ValueKind.INT32)


# ── Other kinds ────────────────────────────────────────────────────


class TestOtherKinds:

    @pytest.mark.parametrize("value", ["", "plain", "ünïcödé", "a" * 1000])
    def test_string_roundtrip(self, value):
        assert decrypt_string(encrypt_string(value, PASSWORD), PASSWORD) == value

    def test_none_string_encrypts_as_empty(self):
        assert decrypt_string(encrypt_string(None)) == ""

    @pytest.mark.parametrize("value", [True, False])
    def test_bool_roundtrip(self, value):
        assert decrypt_bool(encrypt_bool(value, PASSWORD), PASSWORD) is value

    def test_bool_canonical_text(self):
        assert format_value(True, ValueKind.BOOLEAN) == "True"
        assert format_value(False, ValueKind.BOOLEAN) == "False"
        assert parse_value("TRUE", ValueKind.BOOLEAN) is True
        with pytest.raises(ConversionFailure):
            parse_value("yes", ValueKind.BOOLEAN)
        with pytest.raises(ConversionFailure):
            encrypt_bool(1)

    @pytest.mark.parametrize("value", [0.0, -1.5, 3.141592653589793, 1e-300, 1.7976931348623157e308])
    def test_float_roundtrip_is_exact(self, value):
        assert decrypt_float(encrypt_float(value, PASSWORD), PASSWORD) == value

    def test_float_specials(self):
        assert decrypt_float(encrypt_float(math.inf)) == math.inf
        assert math.isnan(decrypt_float(encrypt_float(math.nan)))

    def test_float_accepts_int(self):
        assert decrypt_float(encrypt_float(3)) == 3.0

    @pytest.mark.parametrize("text,expected", [
        (" 1.5 ", 1.5),
        ("-2.", -2.0),
        (".25", 0.25),
        ("1e-300", 1e-300),
        ("+6.02E23", 6.02e23),
        ("-Infinity", -math.inf),
        ("inf", math.inf),
    ])
    def test_float_strict_parse_accepts(self, text, expected):
        assert parse_value(text, ValueKind.FLOAT) == expected

    def test_float_strict_parse_accepts_nan(self):
        assert math.isnan(parse_value("NaN", ValueKind.FLOAT))

    @pytest.mark.parametrize("text", [
        "",
        ".",
        "1_0",
        "١٫٥",       # Arabic-Indic digits
        "0x1p3",
        "1e",
        "infinit",
        "1.5f",
    ])
    def test_float_strict_parse_rejects(self, text):
        with pytest.raises(ConversionFailure):
            parse_value(text, ValueKind.FLOAT)

    def test_non_ascii_float_blob_rejected(self):
        blob = encrypt_string("١٫٥", PASSWORD)
        with pytest.raises(ConversionFailure):
            decrypt_float(blob, PASSWORD)

    @pytest.mark.parametrize("value", [Decimal("0"), Decimal("-12.3400"), Decimal("1E+30"), 7])
    def test_decimal_roundtrip(self, value):
        result = decrypt_decimal(encrypt_decimal(value, PASSWORD), PASSWORD)
        assert result == Decimal(value)
        assert str(result) == str(Decimal(value))

    def test_decimal_rejects_non_finite(self):
        with pytest.raises(ConversionFailure):
            encrypt_decimal(Decimal("NaN"))
        with pytest.raises(ConversionFailure):
            parse_value("Infinity", ValueKind.DECIMAL)
        with pytest.raises(ConversionFailure):
            parse_value("twelve", ValueKind.DECIMAL)

    def test_kind_accepts_plain_string(self):
        assert parse_value("12", "int16") == 12


# ── Layering of errors ─────────────────────────────────────────────


class TestErrorLayering:
    """ConversionFailure sits on top of, and apart from, engine errors."""

    def test_text_blob_decrypted_as_int(self):
        blob = encrypt_string("not a number", PASSWORD)
        with pytest.raises(ConversionFailure):
            decrypt_int(blob, PASSWORD)

    def test_empty_string_decrypted_as_long(self):
        blob = encrypt_string("", PASSWORD)
        with pytest.raises(ConversionFailure):
            decrypt_long(blob, PASSWORD)

    def test_wrong_password_is_cryptographic(self):
        blob = encrypt_int(123, PASSWORD)
        with pytest.raises(CryptographicFailure):
            decrypt_int(blob, "WrongPassword")

    def test_empty_password_is_invalid_argument(self):
        with pytest.raises(InvalidArgument):
            encrypt_short(1, "")
        with pytest.raises(InvalidArgument):
            decrypt_short(encrypt_short(1), "")

    def test_malformed_blob(self):
        with pytest.raises(MalformedInput):
            decrypt_int("not-base64!!")

    def test_conversion_failure_audited(self, audit_events):
        blob = encrypt_string("abc", PASSWORD)
        with pytest.raises(ConversionFailure):
            decrypt_int(blob, PASSWORD)
        event_type, _, _, details = audit_events[-1]
        assert event_type == CipherEventType.CONVERSION_FAILED
        assert details["kind"] == "int32"
        assert "abc" not in repr(audit_events)


# ── URL escaping ───────────────────────────────────────────────────


class TestUrlEscaping:

    def test_escape_then_unescape(self):
        escaped = escape_and_encrypt(31337, ValueKind.INT32, PASSWORD)
        assert "+" not in escaped and "/" not in escaped and "=" not in escaped
        assert unescape_and_decrypt(escaped, ValueKind.INT32, PASSWORD) == 31337

    def test_unescape_reserved_characters(self):
        blob = encrypt_long(-5, PASSWORD)
        escaped = blob.replace("%", "%25").replace("+", "%2B").replace("/", "%2F").replace("=", "%3D")
        assert unescape_and_decrypt(escaped, ValueKind.INT64, PASSWORD) == -5

    def test_plus_is_not_a_space(self):
        # Unescaped blobs pass through untouched, '+' included
        blob = encrypt_int(99)
        assert unescape_and_decrypt(blob, ValueKind.INT32) == 99


# ── Lenient parsers ────────────────────────────────────────────────


class TestLenientParsers:

    def test_valid_literals(self):
        assert to_short("123") == 123
        assert to_int("-2147483648") == -2147483648
        assert to_long("9223372036854775807") == 9223372036854775807

    @pytest.mark.parametrize("text", [None, "", "abc", "1.5", "99999999999999999999"])
    def test_garbage_is_zero(self, text):
        assert to_long(text) == 0

    def test_out_of_range_is_zero(self):
        assert to_short("32768") == 0
        assert to_int("2147483648") == 0
