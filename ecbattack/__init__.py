"""
ECB byte-at-a-time secret recovery.

Recovers the unknown suffix an ECB encryption oracle appends to chosen input.
"""

from .runner import AttackResult, attack, interrogate
from .demo import DemoResult, run_ecb_demo
from .errors import (BudgetExceeded, DetectionFailure, ECBAttackError,
                     KeyLengthError, RecoveryIncomplete)
from .oracle import CountingOracle, EcbOracle
from .recover import ByteRecoveryEngine
from .steplog import StepLog

__version__ = "0.1.0"
