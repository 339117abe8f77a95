"""
Oracle interrogation

Everything here is learned from ciphertexts only:
  - block size: PKCS#7 makes the ciphertext grow one whole block at a time
  - ECB mode: identical plaintext blocks give identical ciphertext blocks
  - chosen offset: how many fixed bytes sit before our input
  - secret length: how many input bytes it takes to reach the next block
"""

import logging

from .buffers import block_diff, repeated_blocks
from .config import BLOCK_FILLER, MAX_BLOCK_SIZE
from .errors import DetectionFailure

logger = logging.getLogger(__name__)


def check_deterministic(oracle, probe: bytes = b"") -> None:
    """Raise DetectionFailure if the same query gives two different ciphertexts."""
    if oracle(probe) != oracle(probe):
        raise DetectionFailure("Oracle is not deterministic (random IV or per-call state?)")


def find_block_size(oracle, max_block_size: int = MAX_BLOCK_SIZE, filler: bytes = BLOCK_FILLER) -> int:
    """Detects the block size by observing ciphertext length changes"""
    previous = len(oracle(b""))

    for i in range(1, 2 * max_block_size + 1):
        length = len(oracle(filler * i))
        if length < previous:
            raise DetectionFailure(f"Ciphertext shrank from {previous} to {length} bytes "
                                   f"with {i} input bytes")
        if length > previous:
            # first jump is the smallest one: padding grows in whole blocks
            logger.debug("length jump %d -> %d at %d input bytes", previous, length, i)
            return length - previous
        previous = length

    raise DetectionFailure(f"No ciphertext length change within {2 * max_block_size} input bytes")


def detect_ecb(oracle, block_size: int, filler: bytes = BLOCK_FILLER) -> bool:
    """
    Detect ECB via the repeated-block heuristic.

    Three blocks of filler always contain two aligned identical blocks,
    whatever the length of a fixed prefix.
    """
    ciphertext = oracle(filler * (3 * block_size))
    return bool(repeated_blocks(ciphertext, block_size))


def find_chosen_offset(oracle, block_size: int) -> int:
    """
    Return the number of fixed bytes placed before our input.

    A base input of block_size + 1 bytes crosses at least one block boundary.
    Changing its leading bytes one at a time alters a single block until the
    change spills into the next block; the number of bytes changed before
    that is the length of our fragment in the first block.
    """
    span = block_size + 1
    base = oracle(b"O" * span)

    first = None
    for i in range(1, span + 1):
        probe = b"X" * i + b"O" * (span - i)
        try:
            different = block_diff(block_size, base, oracle(probe))
        except ValueError as e:
            raise DetectionFailure(f"Offset detection yielded undiff-able ciphertexts: {e}") from e

        if not different:
            raise DetectionFailure("Offset detection yielded identical ciphertexts")
        if first is None:
            if len(different) > 1:
                raise DetectionFailure("One changed byte altered several blocks (not ECB mode?)")
            first = different[0]
        if max(different) > first:
            fragment = i - 1
            return (first + 1) * block_size - fragment

    raise DetectionFailure("Offset detection never crossed a block boundary")


def find_secret_length(oracle, block_size: int, prefix_length: int = 0,
                       filler: bytes = BLOCK_FILLER) -> int:
    """Detects secret length by observing when padding causes a new block"""
    initial_length = len(oracle(b""))

    for k in range(1, block_size + 1):
        if len(oracle(filler * k)) > initial_length:
            # k input bytes completed the last block exactly
            secret_length = initial_length - k - prefix_length
            if secret_length < 0:
                raise DetectionFailure(f"Negative secret length ({secret_length}); "
                                       f"prefix length {prefix_length} is wrong")
            return secret_length

    raise DetectionFailure(f"No ciphertext length change within {block_size} input bytes")
