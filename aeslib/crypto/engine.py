import logging

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.backends import default_backend

from aeslib.common.errors import PaddingError

logger = logging.getLogger(__name__)

# --- One-shot AES-CBC-PKCS7 Transforms ---
# Cipher, encryptor and padder objects live only for the duration of one call.

BLOCK_SIZE = algorithms.AES.block_size  # bits


def cbc_encrypt(key: bytes, iv: bytes, plaintext: bytes) -> bytes:
    """
    Pads plaintext with PKCS#7 and encrypts it with AES-CBC.
    Returns the raw ciphertext (a multiple of 16 bytes, never empty).
    """
    padder = sym_padding.PKCS7(BLOCK_SIZE).padder()
    padded_data = padder.update(plaintext) + padder.finalize()

    cipher = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend())
    encryptor = cipher.encryptor()
    return encryptor.update(padded_data) + encryptor.finalize()


def cbc_decrypt(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypts AES-CBC ciphertext and strips PKCS#7 padding.
    Raises PaddingError if the length is not a block multiple or the padding is bad.
    """
    cipher = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend())
    decryptor = cipher.decryptor()
    try:
        padded_plaintext = decryptor.update(ciphertext) + decryptor.finalize()
    except ValueError as e:
        logger.warning("[Engine] Ciphertext rejected: %s", e)
        raise PaddingError(f"Ciphertext length {len(ciphertext)} is not a multiple of the block size") from e

    unpadder = sym_padding.PKCS7(BLOCK_SIZE).unpadder()
    try:
        return unpadder.update(padded_plaintext) + unpadder.finalize()
    except ValueError as e:
        logger.warning("[Engine] PKCS#7 padding check failed")
        raise PaddingError("Invalid PKCS#7 padding") from e
