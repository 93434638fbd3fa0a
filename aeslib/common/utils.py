import base64
import binascii
import codecs

from aeslib.common.errors import MalformedInputError

# --- Base64 / Text Helpers ---

def b64e(b: bytes) -> str:
    """Base64-encode bytes -> str (RFC 4648, padded)."""
    return base64.b64encode(b).decode('ascii')

def b64d(s: str) -> bytes:
    """
    Strict Base64-decode str -> bytes.
    Raises MalformedInputError on characters outside the alphabet or bad padding.
    """
    try:
        return base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedInputError(f"Invalid Base64 input: {e}") from e

def check_encoding(encoding: str) -> str:
    """Returns the canonical codec name, raising LookupError for unknown codecs."""
    return codecs.lookup(encoding).name
