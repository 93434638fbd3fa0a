# --- Error Types ---

class AesLibError(Exception):
    """Base class for every error raised by aeslib."""


class InvalidKeyError(AesLibError, ValueError):
    """Key length is not 16, 24 or 32 bytes, or key size is not 128/192/256."""


class InvalidIVError(AesLibError, ValueError):
    """An explicitly supplied IV is not exactly one block long."""


class MalformedInputError(AesLibError, ValueError):
    """
    Input cannot be a framed ciphertext: it is shorter than the IV,
    or the Base64 text wrapping it is not valid.
    """


class CryptographicError(AesLibError):
    """The cipher engine rejected the operation."""


class PaddingError(CryptographicError):
    """
    Ciphertext length is not a multiple of the block size, or the
    PKCS#7 padding did not validate after decryption.
    This is the only tamper signal available and it can miss tampering.
    """


class DisposedError(AesLibError):
    """The wrapper was used after close()."""
