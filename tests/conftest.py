import hashlib
import os

import pytest
from Crypto.Cipher import AES
from Crypto.Util.Padding import pad

from ecbattack.buffers import iter_blocks
from ecbattack.oracle import EcbOracle

ZERO_KEY = bytes(16)


class HashEcbOracle:
    """ECB-like oracle of any block size: each padded block goes through a keyed hash."""

    def __init__(self, secret: bytes, block_size: int = 16, prefix: bytes = b"", key: bytes = b"stub"):
        self.secret = secret
        self.block_size = block_size
        self.prefix = prefix
        self.key = key
        self.queries = 0

    def __call__(self, attacker_input: bytes) -> bytes:
        self.queries += 1
        plaintext = pad(self.prefix + attacker_input + self.secret, self.block_size)
        return b"".join(
            hashlib.blake2b(block, key=self.key, digest_size=self.block_size).digest()
            for block in iter_blocks(plaintext, self.block_size)
        )


class CbcOracle:
    """Deterministic but chained: fixed IV CBC."""

    def __init__(self, secret: bytes, key: bytes = ZERO_KEY):
        self.secret = secret
        self.key = key

    def __call__(self, attacker_input: bytes) -> bytes:
        cipher = AES.new(self.key, AES.MODE_CBC, iv=bytes(16))
        return cipher.encrypt(pad(attacker_input + self.secret, 16))


class RandomIvOracle(CbcOracle):
    def __call__(self, attacker_input: bytes) -> bytes:
        cipher = AES.new(self.key, AES.MODE_CBC, iv=os.urandom(16))
        return cipher.encrypt(pad(attacker_input + self.secret, 16))


@pytest.fixture
def aes_oracle():
    def build(secret: bytes, prefix: bytes = b"", key: bytes = ZERO_KEY):
        return EcbOracle(key, secret, prefix=prefix)
    return build
