"""
Cipher Exception Classes
"""


class CipherException(Exception):
    """Base exception for passcrypt operations"""
    pass


class InvalidArgument(CipherException, ValueError):
    """Raised when the effective password is empty or missing"""
    pass


class MalformedInput(CipherException, ValueError):
    """Raised when a ciphertext blob is not valid base64 or is truncated"""
    pass


class CryptographicFailure(CipherException):
    """Raised when decryption fails (wrong password or corrupted blob)"""
    pass


class ConversionFailure(CipherException, ValueError):
    """Raised when a value cannot be rendered as, or parsed back into, its kind"""
    pass
