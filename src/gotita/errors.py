"""Exception classes for Gotita.

Only malformed input encoding is fatal to a compile. Everything else the
scanners meet is recovered from and reported as a CompileWarning (see
gotita.diagnostics), so these exceptions are few.
"""

from __future__ import annotations


class GotitaError(Exception):
    """Base exception for all Gotita errors.

    Subclass this for specific error categories.
    """

    pass


class InvalidUTF8Error(GotitaError):
    """Source text is not valid UTF-8.

    Raised at the input boundary, before any scanning happens, for byte
    input that does not decode and for ``str`` input carrying lone
    surrogates (the usual residue of a lossy decode).
    """

    def __init__(
        self,
        position: int,
        reason: str = "invalid UTF-8 sequence",
        source_file: str | None = None,
    ) -> None:
        """Initialize with the offending position.

        Args:
            position: Byte offset (bytes input) or character offset (str input)
            reason: Decoder explanation
            source_file: Path to source file (optional)
        """
        self.position = position
        self.reason = reason
        self.source_file = source_file

        location = f"{source_file}: " if source_file else ""
        super().__init__(f"{location}{reason} at offset {position}")


class ConfigError(GotitaError):
    """Invalid parse configuration or render options."""

    def __init__(self, option: str, message: str) -> None:
        """Initialize config error.

        Args:
            option: Name of the offending option
            message: Description of the problem
        """
        self.option = option
        super().__init__(f"Option '{option}': {message}")


class RenderError(GotitaError):
    """Error during rendering.

    Raised when a renderer meets a node it cannot handle, which only
    happens for hand-built trees.
    """

    pass
