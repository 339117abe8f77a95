"""
ECB encryption oracle

Simulates a vulnerable service that appends a secret to every message:

    ciphertext = ECB(pad(prefix || attacker_input || secret), key)

The key and secret are fixed when the oracle is built.
"""

import logging
import threading
from typing import Callable, Optional

from Crypto.Cipher import AES, DES
from Crypto.Util.Padding import pad

from .errors import BudgetExceeded, KeyLengthError

logger = logging.getLogger(__name__)

Oracle = Callable[[bytes], bytes]

# Supported block ciphers; key length == block size for both
CIPHERS = {
    "aes": AES,
    "des": DES,
}


def cipher_module(name: str):
    try:
        return CIPHERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown cipher '{name}' (choose from {', '.join(sorted(CIPHERS))})") from None


def block_size_of(name: str) -> int:
    return cipher_module(name).block_size


def key_bytes(key) -> bytes:
    """Copy a bytes-like key; anything else (an int included) is rejected."""
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise TypeError(f"key must be bytes-like, not {type(key).__name__}")
    return bytes(key)


class EcbOracle:
    """Encrypts prefix || input || secret under a fixed key in ECB mode."""

    def __init__(self, key: bytes, secret: bytes, prefix: bytes = b"", cipher: str = "aes"):
        self._module = cipher_module(cipher)
        self.block_size = self._module.block_size
        key = key_bytes(key)
        if len(key) != self.block_size:
            raise KeyLengthError(self.block_size, len(key))
        self._key = key
        self._secret = bytes(secret)
        self._prefix = bytes(prefix)
        self.cipher = cipher.lower()

    def encrypt(self, attacker_input: bytes) -> bytes:
        plaintext = self._prefix + bytes(attacker_input) + self._secret
        ecb = self._module.new(self._key, self._module.MODE_ECB)
        return ecb.encrypt(pad(plaintext, self.block_size))

    __call__ = encrypt

    def __repr__(self):
        return f"EcbOracle(cipher={self.cipher!r}, block_size={self.block_size})"


class CountingOracle:
    """
    Wraps an oracle and counts queries.

    With a budget set, the query that would exceed it raises BudgetExceeded
    instead of reaching the wrapped oracle.
    """

    def __init__(self, oracle: Oracle, budget: Optional[int] = None):
        self._oracle = oracle
        self.budget = budget
        self.queries = 0
        self._lock = threading.Lock()

    def __call__(self, attacker_input: bytes) -> bytes:
        with self._lock:
            if self.budget is not None and self.queries >= self.budget:
                logger.debug("query budget %d reached", self.budget)
                raise BudgetExceeded(self.budget)
            self.queries += 1
        return self._oracle(attacker_input)
