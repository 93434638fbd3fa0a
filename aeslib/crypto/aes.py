"""
AES-CBC wrapper producing self-contained ciphertext.

Wire format (framed ciphertext):

    offset 0..16   : IV (16 raw bytes)
    offset 16..end : PKCS#7-padded AES-CBC ciphertext (multiple of 16 bytes)

There is no version tag and no integrity tag. Padding validation on
decrypt is the only (weak) tamper signal.

Encryption uses the wrapper's current IV and keeps using it until
regenerate_iv() is called, unless the wrapper was built with rotate_iv=True.
Decryption takes its IV from the frame and never touches the stored one.
"""
import logging

from aeslib.common.errors import DisposedError, MalformedInputError
from aeslib.common.utils import b64e, b64d, check_encoding
from aeslib.crypto.engine import cbc_encrypt, cbc_decrypt
from aeslib.crypto.keys import DEFAULT_KEY_SIZE, IV_SIZE, KeySize, KeyState, validate_iv, validate_key

logger = logging.getLogger(__name__)


def _as_bytes(value, what):
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{what} must be bytes, not {type(value).__name__}")
    return bytes(value)


class AesWrapper:
    """AES-CBC-PKCS7 with the IV prepended to every ciphertext."""

    def __init__(self, key_size=DEFAULT_KEY_SIZE, key=None, rotate_iv=False):
        """
        key_size: KeySize or 128/192/256.
        key: explicit key, must be exactly key_size // 8 bytes. Random if omitted.
        rotate_iv: draw a fresh IV before every encrypt instead of reusing one.
        """
        self._state = KeyState(key_size, key)
        self.rotate_iv = rotate_iv

    # --- Lifecycle ---

    def close(self):
        """Drops the key and IV. Safe to call more than once."""
        if self._state is not None:
            self._state = None
            logger.debug("[AES] Cipher context released")

    @property
    def closed(self) -> bool:
        return self._state is None

    def __enter__(self):
        self._require_open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _require_open(self) -> KeyState:
        state = self._state
        if state is None:
            raise DisposedError("AesWrapper has been closed")
        return state

    # --- Key / IV ---

    @property
    def key(self) -> bytes:
        """Raw key material. Do not log or persist it in the clear."""
        return self._require_open().key

    @key.setter
    def key(self, value):
        self._require_open().key = value

    def set_key(self, value):
        self.key = value

    @property
    def key_size(self) -> KeySize:
        return self._require_open().key_size

    @property
    def iv(self) -> bytes:
        """The IV the next encrypt() will prepend."""
        return self._require_open().iv

    def regenerate_key(self):
        self._require_open().regenerate_key()

    def regenerate_iv(self):
        self._require_open().regenerate_iv()

    # --- Bytes ---

    def encrypt(self, value, iv=None):
        """
        Encrypts bytes into IV || ciphertext.
        None passes through as None. An explicit iv is used for this call
        only and does not replace the stored IV.
        """
        if value is None:
            return None
        value = _as_bytes(value, "Plaintext")
        state = self._require_open()

        if iv is not None:
            key = state.key
            iv = validate_iv(iv)
        elif self.rotate_iv:
            key, iv = state.rotate()
        else:
            key, iv = state.snapshot()

        ct = cbc_encrypt(key, iv, value)
        logger.debug("[AES] Encrypted %d bytes -> %d byte frame", len(value), IV_SIZE + len(ct))
        return iv + ct

    def decrypt(self, value):
        """
        Decrypts IV || ciphertext back to plaintext bytes.
        None passes through as None.
        """
        if value is None:
            return None
        value = _as_bytes(value, "Ciphertext")
        state = self._require_open()

        if len(value) < IV_SIZE:
            logger.warning("[AES] Frame too short: %d bytes", len(value))
            raise MalformedInputError(
                f"Framed ciphertext must be at least {IV_SIZE} bytes, got {len(value)}")

        iv = value[:IV_SIZE]
        ciphertext = value[IV_SIZE:]
        plaintext = cbc_decrypt(state.key, iv, ciphertext)
        logger.debug("[AES] Decrypted %d byte frame -> %d bytes", len(value), len(plaintext))
        return plaintext

    # --- Text ---

    def encrypt_to_base64(self, text, encoding='utf-8') -> str:
        """Encrypts a string and returns Base64 of IV || ciphertext. None/'' give ''."""
        if not text:
            return ''
        check_encoding(encoding)
        return b64e(self.encrypt(text.encode(encoding)))

    def decrypt_from_base64(self, text, encoding='utf-8') -> str:
        """Reverses encrypt_to_base64. None/'' give ''."""
        if not text:
            return ''
        check_encoding(encoding)
        return self.decrypt(b64d(text)).decode(encoding)


# --- One-shot helpers ---

def aes_encrypt(key, plaintext, encoding='utf-8'):
    """
    Encrypts a string under key with a fresh random IV.
    Returns: Base64-encoded string of (iv + ciphertext)
    """
    key = validate_key(key)
    with AesWrapper(len(key) * 8, key) as aes:
        return aes.encrypt_to_base64(plaintext, encoding)

def aes_decrypt(key, b64_ciphertext, encoding='utf-8'):
    """
    Decrypts a Base64-encoded (IV + ciphertext) string.
    """
    key = validate_key(key)
    with AesWrapper(len(key) * 8, key) as aes:
        return aes.decrypt_from_base64(b64_ciphertext, encoding)
