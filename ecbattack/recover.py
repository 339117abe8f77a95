"""
ECB byte-at-a-time recovery

For each secret position i:
  1. Send just enough filler so that secret byte i is the last byte of a block
     and keep that ciphertext block (the target).
  2. Send filler || recovered bytes || b for all 256 values of b, keeping the
     same block of each ciphertext (the dictionary).
  3. The value whose block equals the target is secret byte i.

Positions are strictly sequential: every dictionary query carries the bytes
already recovered.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional

from tqdm import tqdm

from .buffers import block_at, printable
from .config import BLOCK_FILLER
from .errors import RecoveryIncomplete
from .steplog import StepLog

logger = logging.getLogger(__name__)

CANDIDATES = range(256)


class ByteRecoveryEngine:
    """
    Recovers the secret appended by an ECB oracle.

    Args:
        oracle: callable bytes -> ciphertext
        block_size: cipher block size
        secret_length: number of bytes to recover
        prefix_length: fixed bytes the oracle puts before our input
        filler: byte used for alignment
        workers: threads used for the 256 dictionary queries of a position
        steps: StepLog receiving narration (a new one is created if omitted)
        progress: show a tqdm bar over positions
    """

    def __init__(self, oracle, block_size: int, secret_length: int, *, prefix_length: int = 0,
                 filler: bytes = BLOCK_FILLER, workers: int = 1,
                 steps: Optional[StepLog] = None, progress: bool = False):
        if len(filler) != 1:
            raise ValueError("filler must be a single byte")
        if block_size < 1:
            raise ValueError("block_size must be >= 1")
        if secret_length < 0 or prefix_length < 0:
            raise ValueError("lengths must be >= 0")

        self.oracle = oracle
        self.block_size = block_size
        self.secret_length = secret_length
        self.prefix_length = prefix_length
        self.filler = filler
        self.workers = workers
        self.steps = steps if steps is not None else StepLog()
        self.progress = progress

        self.recovered = bytearray()
        self.complete = False
        self.collisions = 0
        self._executor = None

        # filler completing the prefix's last block, and the blocks to skip
        self._align = -prefix_length % block_size
        self._skip = (prefix_length + self._align) // block_size

    def alignment(self, i: int):
        """Return (pad, block_index) placing secret byte i last in a block."""
        shift = self.block_size - 1 - (i % self.block_size)
        pad = self._align + shift
        block_index = self._skip + (shift + i) // self.block_size
        return pad, block_index

    def _query_block(self, attacker_input: bytes, block_index: int) -> bytes:
        return block_at(self.oracle(attacker_input), self.block_size, block_index)

    def build_dictionary(self, pad: int, block_index: int) -> Dict[bytes, int]:
        """
        Map each candidate's ciphertext block to the candidate byte.

        Built fresh for every position and never cached. On a collision
        the lowest byte value wins.
        """
        prefix = self.filler * pad + bytes(self.recovered)
        probes = [prefix + bytes([b]) for b in CANDIDATES]

        def query(probe):
            return self._query_block(probe, block_index)

        if self._executor is not None:
            blocks = list(self._executor.map(query, probes))
        elif self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                blocks = list(executor.map(query, probes))
        else:
            blocks = [self._query_block(p, block_index) for p in probes]

        dictionary: Dict[bytes, int] = {}
        for b, block in zip(CANDIDATES, blocks):
            if not block:
                continue
            if block in dictionary:
                self.collisions += 1
                self.steps.append(f"Dictionary collision at position {len(self.recovered)}: "
                                  f"0x{b:02x} and 0x{dictionary[block]:02x} give the same block, "
                                  f"keeping 0x{dictionary[block]:02x}")
                continue
            dictionary[block] = b
        return dictionary

    def recover_byte(self, i: int) -> int:
        """Recover secret byte i; bytes 0..i-1 must already be recovered."""
        if i != len(self.recovered):
            raise ValueError(f"position {i} requested but {len(self.recovered)} bytes recovered")

        pad, block_index = self.alignment(i)
        target = self._query_block(self.filler * pad, block_index)
        if not target:
            raise RecoveryIncomplete(i, self.recovered)

        dictionary = self.build_dictionary(pad, block_index)
        b = dictionary.get(target)
        if b is None:
            raise RecoveryIncomplete(i, self.recovered)

        self.recovered.append(b)
        logger.debug("position %d: pad=%d block=%d byte=0x%02x", i, pad, block_index, b)
        self.steps.append(f"Recovered byte {i + 1}: 0x{b:02x} ({printable(b)})")
        return b

    def recover(self) -> bytes:
        """Recover the whole secret, or the prefix found before a dictionary miss."""
        start = len(self.recovered)
        bar = tqdm(total=self.secret_length - start, desc="Recovering", unit="byte",
                   disable=not self.progress)
        # one pool serves every position
        if self.workers > 1:
            self._executor = ThreadPoolExecutor(max_workers=self.workers)

        try:
            for i in range(start, self.secret_length):
                self.recover_byte(i)
                bar.update(1)
        except RecoveryIncomplete as e:
            self.steps.append(f"No matching byte found at position {e.position + 1} - "
                              f"likely end of secret or padding reached; "
                              f"stopping with {len(e.recovered)} bytes")
            return bytes(self.recovered)
        finally:
            bar.close()
            if self._executor is not None:
                self._executor.shutdown()
                self._executor = None

        self.complete = True
        self.steps.append(f"Recovery complete: {len(self.recovered)} bytes")
        return bytes(self.recovered)
