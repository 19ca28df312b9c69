"""Exception types raised by the routeshare core.

Each error names the pipeline stage that failed so callers can report it
without inspecting the message.
"""


class RouteshareError(Exception):
    """Base class for all routeshare failures."""

    stage = "unknown"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.stage}: {self.message}"


class MalformedInputError(RouteshareError):
    """Track data is structurally invalid or has too few points."""

    stage = "parse"


class RetrievalError(RouteshareError):
    """An external activity could not be fetched or decoded."""

    stage = "retrieve"


class CompositionError(RouteshareError):
    """The overlay image could not be laid out or rasterized."""

    stage = "compose"
