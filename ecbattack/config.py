"""
Attack settings.

Module constants hold the defaults; AttackConfig bundles them for one run.
"""

from dataclasses import dataclass
from typing import Optional

# Byte used to fill chosen input (any fixed value works)
BLOCK_FILLER = b"A"

# Largest block size considered while probing ciphertext lengths
MAX_BLOCK_SIZE = 256

DEFAULT_CIPHER = "aes"

# Oracle service
HOST = "localhost"
PORT = 1337

HTTP_TIMEOUT = 10


@dataclass(frozen=True)
class AttackConfig:
    filler: bytes = BLOCK_FILLER
    max_block_size: int = MAX_BLOCK_SIZE
    query_budget: Optional[int] = None   # None = unlimited
    workers: int = 1                     # threads for dictionary queries
    progress: bool = False

    def __post_init__(self):
        if len(self.filler) != 1:
            raise ValueError("filler must be a single byte")
        if self.max_block_size < 1:
            raise ValueError("max_block_size must be >= 1")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.query_budget is not None and self.query_budget < 0:
            raise ValueError("query_budget must be >= 0")
