"""Errors raised by the repetition counter."""


class RepCounterError(Exception):
    """Base class for rep counter errors."""


class LowConfidenceFrame(RepCounterError):
    """Frame is missing a required keypoint or one is below the confidence threshold.

    Raised and handled inside the reducer; callers never see it.
    """

    def __init__(self, keypoint_index: int, score: float = None):
        self.keypoint_index = keypoint_index
        self.score = score
        super().__init__(f"Keypoint {keypoint_index} rejected (score={score})")


class InvalidConfiguration(RepCounterError, ValueError):
    """Threshold configuration violates ordering invariants."""
