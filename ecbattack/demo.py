"""
Demo entry point: build an oracle from (key, attacker_input, unknown),
attack it, and hand back {ciphertext, recovered, steps}.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .config import DEFAULT_CIPHER, AttackConfig
from .errors import KeyLengthError
from .oracle import EcbOracle, block_size_of, key_bytes
from .runner import attack
from .steplog import StepLog

Text = Union[str, bytes]


@dataclass(frozen=True)
class DemoResult:
    ciphertext: bytes
    recovered: bytes
    steps: Tuple[str, ...]
    complete: bool = True

    def to_dict(self) -> dict:
        return {
            "ciphertext": self.ciphertext,
            "recovered": self.recovered,
            "steps": list(self.steps),
            "complete": self.complete,
        }


def _to_bytes(value: Text) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected str or bytes, not {type(value).__name__}")
    return bytes(value)


def run_ecb_demo(key, attacker_input: Text = "", unknown: Text = "", *,
                 cipher: str = DEFAULT_CIPHER, config: Optional[AttackConfig] = None) -> DemoResult:
    """
    Run the byte-at-a-time attack against a fresh oracle.

    Args:
        key: cipher key, exactly one block long (16 bytes for AES, 8 for DES)
        attacker_input: fixed text placed before every query
        unknown: the secret the oracle appends and the attack recovers
        cipher: "aes" or "des"
        config: attack settings

    Returns:
        DemoResult; recovered equals unknown (UTF-8) when complete is True

    Raises KeyLengthError before any oracle query, and DetectionFailure or
    BudgetExceeded if the attack cannot run.
    """
    key = key_bytes(key)
    expected = block_size_of(cipher)
    if len(key) != expected:
        raise KeyLengthError(expected, len(key))

    oracle = EcbOracle(key, _to_bytes(unknown), prefix=_to_bytes(attacker_input), cipher=cipher)
    ciphertext = oracle.encrypt(b"")

    steps = StepLog()
    steps.append(f"Ciphertext length: {len(ciphertext)} bytes")

    result = attack(oracle, config, steps)
    return DemoResult(ciphertext=ciphertext,
                      recovered=result.recovered,
                      steps=result.steps,
                      complete=result.complete)
