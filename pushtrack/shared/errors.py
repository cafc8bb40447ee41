"""Errors raised by external collaborators (frame sources, storage, scoring API)."""


class FrameSourceError(Exception):
    """Camera, video or keypoint stream could not produce frames."""


class PersistenceError(Exception):
    """Workout session could not be saved or queried."""


class PoseScorerError(Exception):
    """Remote pose scoring API failed or returned an unusable response."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)
