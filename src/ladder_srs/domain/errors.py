"""Contract-violation errors raised by the engine.

There is no recoverable error category: anything raised here means the
caller handed over state it should never have stored.
"""


class SrsError(Exception):
    """Base class for all engine errors."""


class InvalidStageError(SrsError, ValueError):
    def __init__(self, stage: object):
        super().__init__(f"Stage must be an integer in [0, 9], got {stage!r}")
        self.stage = stage


class InvalidEaseFactorError(SrsError, ValueError):
    def __init__(self, ease_factor: object):
        super().__init__(f"Ease factor must be a non-negative number, got {ease_factor!r}")
        self.ease_factor = ease_factor


class InvalidTimestampError(SrsError, ValueError):
    def __init__(self, value: object, reason: str = "expected a timezone-aware datetime"):
        super().__init__(f"Invalid timestamp {value!r}: {reason}")
        self.value = value


class InvalidRepetitionsError(SrsError, ValueError):
    def __init__(self, repetitions: object):
        super().__init__(f"Repetitions must be a non-negative integer, got {repetitions!r}")
        self.repetitions = repetitions
