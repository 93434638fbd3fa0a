"""
Key and IV lifecycle for the AES wrapper.

KeyState owns the current key and the IV used for encryption. It never
decides when to rotate anything on its own; callers ask for it.
"""
import enum
import logging
import os
import threading

from aeslib.common.errors import InvalidKeyError, InvalidIVError

logger = logging.getLogger(__name__)

IV_SIZE = 16  # bytes, one AES block
VALID_KEY_LENGTHS = (16, 24, 32)


class KeySize(enum.IntEnum):
    """AES key length in bits."""
    KEY_SIZE_128 = 128
    KEY_SIZE_192 = 192
    KEY_SIZE_256 = 256


DEFAULT_KEY_SIZE = KeySize.KEY_SIZE_256


def to_key_size(key_size) -> KeySize:
    """Accepts a KeySize or a plain int (128/192/256)."""
    try:
        return KeySize(key_size)
    except ValueError:
        raise InvalidKeyError(f"Key size must be 128, 192 or 256 bits, got {key_size!r}") from None


def generate_key(key_size=DEFAULT_KEY_SIZE) -> bytes:
    """Random key of key_size bits from the OS CSPRNG."""
    return os.urandom(to_key_size(key_size) // 8)


def generate_iv() -> bytes:
    return os.urandom(IV_SIZE)


def validate_key(key, key_size=None) -> bytes:
    """
    Checks key length and returns it as bytes.
    With key_size given the length must match it exactly, otherwise any
    of 16/24/32 bytes is accepted.
    """
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise TypeError(f"AES key must be bytes, not {type(key).__name__}")
    key = bytes(key)
    if key_size is not None:
        expected = to_key_size(key_size) // 8
        if len(key) != expected:
            raise InvalidKeyError(f"AES-{expected * 8} requires a {expected}-byte key, got {len(key)} bytes")
    elif len(key) not in VALID_KEY_LENGTHS:
        raise InvalidKeyError(f"AES key must be 16, 24, or 32 bytes long, got {len(key)} bytes")
    return key


def validate_iv(iv) -> bytes:
    if not isinstance(iv, (bytes, bytearray, memoryview)):
        raise TypeError(f"IV must be bytes, not {type(iv).__name__}")
    iv = bytes(iv)
    if len(iv) != IV_SIZE:
        raise InvalidIVError(f"AES CBC IV must be {IV_SIZE} bytes, got {len(iv)} bytes")
    return iv


class KeyState:
    """
    Current {key, IV} pair.
    Reads and writes go through a lock so a snapshot is always consistent.
    """

    def __init__(self, key_size=DEFAULT_KEY_SIZE, key=None):
        key_size = to_key_size(key_size)
        if key is None:
            key = generate_key(key_size)
            logger.debug("[Keys] Generated random %d-bit key", key_size)
        else:
            key = validate_key(key, key_size)
        self._lock = threading.Lock()
        self._key = key
        self._iv = generate_iv()

    @property
    def key(self) -> bytes:
        with self._lock:
            return self._key

    @key.setter
    def key(self, value):
        value = validate_key(value)
        with self._lock:
            self._key = value
        logger.debug("[Keys] Key replaced (%d-bit)", len(value) * 8)

    @property
    def key_size(self) -> KeySize:
        with self._lock:
            return KeySize(len(self._key) * 8)

    @property
    def iv(self) -> bytes:
        with self._lock:
            return self._iv

    def snapshot(self):
        """Returns (key, iv) read together."""
        with self._lock:
            return self._key, self._iv

    def regenerate_key(self):
        with self._lock:
            self._key = generate_key(len(self._key) * 8)
        logger.debug("[Keys] Key regenerated")

    def regenerate_iv(self) -> bytes:
        """Installs a fresh random IV and returns it."""
        iv = generate_iv()
        with self._lock:
            self._iv = iv
        return iv

    def rotate(self):
        """Installs a fresh IV and returns the (key, iv) pair it belongs to."""
        iv = generate_iv()
        with self._lock:
            self._iv = iv
            return self._key, iv
