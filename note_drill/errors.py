"""Exception types raised by the Note Drill core."""


class NoteDrillError(Exception):
    """Base class for all Note Drill errors."""


class InvalidPitchText(NoteDrillError, ValueError):
    """Raised when a pitch string or spelling cannot be understood."""

    def __init__(self, text):
        self.text = text
        super().__init__(f"Invalid pitch text: {text!r}")


class InvalidArgument(NoteDrillError, ValueError):
    """Raised when an argument violates a documented precondition."""


class EmptySequence(NoteDrillError, ValueError):
    """Raised when picking from an empty sequence."""
