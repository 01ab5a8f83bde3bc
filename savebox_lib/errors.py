"""Exception types raised inside the save pipeline.

The public `SaveBox` surface never raises these; they travel between the
backend, codec and orchestrator layers and are converted to boolean/empty
results (and log lines) at the orchestrator boundary.
"""


class SaveBoxError(Exception):
    """Base class for save pipeline errors."""


class SaveFileNotFoundError(SaveBoxError, KeyError):
    """Raised by backends and the resolver when no variant of a file exists."""

    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"save file not found: {self.path}"


class EnvelopeDecodeError(SaveBoxError, ValueError):
    """The envelope text could not be parsed as a whole."""


class CryptoError(SaveBoxError, ValueError):
    """A cipher or encoding step failed. Providers log it and fail open."""
