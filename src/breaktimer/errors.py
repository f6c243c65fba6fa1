class BreakTimerError(Exception):
    """Base exception for break timer collaborators."""


class PresentationUnavailableError(BreakTimerError):
    """Raised when the rest overlay cannot be shown to the user."""
