"""
Exceptions raised by the ECB byte-at-a-time attack.
"""


class ECBAttackError(Exception):
    """Base class for every error raised by ecbattack."""


class KeyLengthError(ECBAttackError, ValueError):
    """Key length does not match the cipher block size."""

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(f"Invalid key length: {received} (expected {expected})")


class DetectionFailure(ECBAttackError):
    """The oracle did not behave like a deterministic ECB oracle."""


class RecoveryIncomplete(ECBAttackError):
    """
    No dictionary entry matched the target block.

    Carries the position that failed and the bytes recovered before it.
    """

    def __init__(self, position: int, recovered: bytes):
        self.position = position
        self.recovered = bytes(recovered)
        super().__init__(f"No matching byte at position {position} "
                         f"({len(self.recovered)} bytes recovered)")


class BudgetExceeded(ECBAttackError):
    """The oracle was queried more times than allowed."""

    def __init__(self, budget: int):
        self.budget = budget
        super().__init__(f"Oracle query budget of {budget} exceeded")
