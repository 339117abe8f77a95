"""
Full attack against an ECB oracle: interrogate, then recover byte by byte.
"""

import logging
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import AttackConfig
from .detect import (check_deterministic, detect_ecb, find_block_size,
                     find_chosen_offset, find_secret_length)
from .errors import DetectionFailure
from .oracle import CountingOracle
from .recover import ByteRecoveryEngine
from .steplog import StepLog

logger = logging.getLogger(__name__)

Interrogation = namedtuple("Interrogation", ["block_size", "prefix_length", "secret_length"])


@dataclass(frozen=True)
class AttackResult:
    block_size: int
    prefix_length: int
    secret_length: int
    recovered: bytes
    complete: bool
    queries: int
    steps: Tuple[str, ...]


def interrogate(oracle, config: AttackConfig, steps: StepLog) -> Interrogation:
    """Learn block size, chosen offset and secret length from the oracle."""
    check_deterministic(oracle)

    block_size = find_block_size(oracle, config.max_block_size, config.filler)
    steps.append(f"Detected block size: {block_size}")

    if not detect_ecb(oracle, block_size, config.filler):
        steps.append("ECB not detected; aborting attack")
        raise DetectionFailure("No repeated ciphertext block for repeated input (not ECB mode?)")
    steps.append("ECB detected via repeated-block heuristic")

    prefix_length = find_chosen_offset(oracle, block_size)
    if prefix_length:
        steps.append(f"Detected fixed prefix of {prefix_length} bytes before chosen input")

    secret_length = find_secret_length(oracle, block_size, prefix_length, config.filler)
    steps.append(f"Detected secret length: {secret_length} bytes")

    return Interrogation(block_size, prefix_length, secret_length)


def attack(oracle, config: Optional[AttackConfig] = None, steps: Optional[StepLog] = None) -> AttackResult:
    """
    Recover the secret appended by `oracle`.

    DetectionFailure and BudgetExceeded propagate; a dictionary miss ends
    recovery early with complete=False.
    """
    config = config or AttackConfig()
    steps = steps if steps is not None else StepLog()
    counting = CountingOracle(oracle, config.query_budget)

    block_size, prefix_length, secret_length = interrogate(counting, config, steps)

    steps.append(f"Beginning byte-at-a-time recovery ({secret_length} bytes)")
    engine = ByteRecoveryEngine(counting, block_size, secret_length,
                                prefix_length=prefix_length, filler=config.filler,
                                workers=config.workers, steps=steps,
                                progress=config.progress)
    recovered = engine.recover()
    logger.debug("attack finished after %d oracle queries", counting.queries)

    return AttackResult(block_size=block_size,
                        prefix_length=prefix_length,
                        secret_length=secret_length,
                        recovered=recovered,
                        complete=engine.complete,
                        queries=counting.queries,
                        steps=steps.entries())
