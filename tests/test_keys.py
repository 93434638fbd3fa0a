import pytest

from aeslib.common.errors import InvalidKeyError
from aeslib.crypto.aes import AesWrapper
from aeslib.crypto.keys import KeySize, KeyState, generate_key, generate_iv, validate_key


def test_default_is_aes256():
    aes = AesWrapper()
    assert aes.key_size == KeySize.KEY_SIZE_256
    assert len(aes.key) == 32
    assert len(aes.iv) == 16


@pytest.mark.parametrize("key_size", list(KeySize))
def test_generated_key_matches_size(key_size):
    aes = AesWrapper(key_size)
    assert len(aes.key) == key_size // 8
    assert aes.key_size == key_size


@pytest.mark.parametrize("key_size", [128, 192, 256])
def test_plain_int_key_size(key_size):
    assert AesWrapper(key_size).key_size == key_size


@pytest.mark.parametrize("key_size", [0, 64, 129, 512, None, "256"])
def test_bad_key_size(key_size):
    with pytest.raises(InvalidKeyError):
        AesWrapper(key_size)


@pytest.mark.parametrize("length", [15, 17, 20, 33])
def test_construct_rejects_bad_key_length(length):
    with pytest.raises(InvalidKeyError):
        AesWrapper(KeySize.KEY_SIZE_256, bytes(length))


@pytest.mark.parametrize("key_size", list(KeySize))
def test_construct_accepts_matching_key(key_size):
    key = bytes(range(key_size // 8))
    aes = AesWrapper(key_size, key)
    assert aes.key == key


def test_construct_rejects_key_of_other_valid_size():
    with pytest.raises(InvalidKeyError):
        AesWrapper(KeySize.KEY_SIZE_128, bytes(32))


@pytest.mark.parametrize("length", [15, 17, 20, 33])
def test_set_key_rejects_bad_length(length):
    aes = AesWrapper()
    original = aes.key
    with pytest.raises(InvalidKeyError):
        aes.set_key(bytes(length))
    assert aes.key == original


@pytest.mark.parametrize("length", [16, 24, 32])
def test_set_key_accepts_valid_length(length):
    aes = AesWrapper()
    iv = aes.iv
    aes.key = bytes(length)
    assert aes.key == bytes(length)
    assert aes.key_size == length * 8
    assert aes.iv == iv


def test_set_key_rejects_non_bytes():
    with pytest.raises(TypeError):
        AesWrapper().set_key("0" * 32)


def test_replaced_key_is_used():
    aes = AesWrapper(128)
    aes.key = bytes(16)
    frame = aes.encrypt(b"hello")
    with AesWrapper(128, bytes(16)) as other:
        assert other.decrypt(frame) == b"hello"


def test_regenerate_key_keeps_size_and_iv():
    aes = AesWrapper(192)
    key, iv = aes.key, aes.iv
    aes.regenerate_key()
    assert aes.key != key
    assert len(aes.key) == 24
    assert aes.iv == iv


def test_key_state_snapshot_is_consistent():
    state = KeyState(128, bytes(16))
    key, iv = state.snapshot()
    assert key == bytes(16)
    assert iv == state.iv
    new_key, new_iv = state.rotate()
    assert new_key == key
    assert new_iv == state.iv


def test_generators():
    assert len(generate_key(KeySize.KEY_SIZE_192)) == 24
    assert generate_key() != generate_key()
    assert len(generate_iv()) == 16
    assert generate_iv() != generate_iv()


def test_validate_key_copies_to_bytes():
    assert validate_key(bytearray(16)) == bytes(16)
    assert type(validate_key(bytearray(16))) is bytes
