"""
Exception hierarchy shared by the encoder, the transmitter and the receiver.
"""


class MorseError(Exception):
    """Base class for every error raised by this package."""


class ResourceUnavailable(MorseError):
    """No playback or capture device could be acquired."""


class IOFailure(MorseError):
    """Reading from or writing to an audio stream failed."""


class InterruptedWait(MorseError):
    """A blocking wait was aborted before playback completed."""


class InvalidSymbol(MorseError, ValueError):
    """The encoder received a token outside {'.', '-', '|', ' '}."""

    def __init__(self, symbol: str):
        super().__init__(f"Unsupported symbol: {symbol!r}")
        self.symbol = symbol


class MissingResource(MorseError, FileNotFoundError):
    """The symbol table could not be found at startup."""
