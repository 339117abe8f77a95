"""
Helpers to cut ciphertext buffers into blocks and compare them.
"""

from typing import Iterator, List, Set


def split_blocks(buf: bytes, block_size: int) -> List[bytes]:
    """Split a buffer into block_size chunks (last one may be short)."""
    return [buf[i:i + block_size] for i in range(0, len(buf), block_size)]


def iter_blocks(buf: bytes, block_size: int) -> Iterator[bytes]:
    return (buf[i:i + block_size] for i in range(0, len(buf), block_size))


def block_at(buf: bytes, block_size: int, index: int) -> bytes:
    """
    Return block number `index` of buf.

    Returns b"" when the buffer does not hold a full block at that index.
    """
    start = index * block_size
    block = buf[start:start + block_size]
    if len(block) != block_size:
        return b""
    return block


def block_diff(block_size: int, blob1: bytes, blob2: bytes) -> List[int]:
    """
    Return the indexes of the blocks that differ between two blobs.

    Example:
    block_diff(8, b'1234567812345678', b'12345678XXXXXXXX')
    => [1]
    """
    if len(blob1) != len(blob2):
        raise ValueError("Ciphertexts not the same length")
    if len(blob1) % block_size != 0:
        raise ValueError("Ciphertexts do not have an even multiple of blocks")

    blocks1 = split_blocks(blob1, block_size)
    blocks2 = split_blocks(blob2, block_size)
    return [i for i, (b1, b2) in enumerate(zip(blocks1, blocks2)) if b1 != b2]


def repeated_blocks(buf: bytes, block_size: int) -> Set[bytes]:
    """Blocks that appear more than once in buf."""
    seen = set()
    repeated = set()
    for block in iter_blocks(buf, block_size):
        if block in seen:
            repeated.add(block)
        seen.add(block)
    return repeated


def printable(b: int) -> str:
    """Printable form of a byte for narration."""
    if 0x20 <= b < 0x7f or b in (0x09, 0x0a, 0x0d):
        return repr(chr(b))[1:-1] if b < 0x20 else chr(b)
    return f"0x{b:02x}"
