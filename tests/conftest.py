import pytest

from aeslib.crypto.aes import AesWrapper
from aeslib.crypto.keys import KeySize


@pytest.fixture
def zero_key():
    return bytes(32)


@pytest.fixture
def aes(zero_key):
    wrapper = AesWrapper(KeySize.KEY_SIZE_256, zero_key)
    yield wrapper
    wrapper.close()


@pytest.fixture(params=list(KeySize), ids=lambda ks: f"aes{int(ks)}")
def any_aes(request):
    wrapper = AesWrapper(request.param)
    yield wrapper
    wrapper.close()
