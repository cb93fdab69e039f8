"""Custom exceptions for mdexport services."""


class MdExportError(Exception):
    """Base class for all mdexport errors."""


class InlineParseError(MdExportError):
    """Raised when an inline Markdown sequence cannot be interpreted.

    Never propagated past the inline formatter: callers receive it as the
    error half of an InlineParseResult and fall back to literal text.

    Attributes:
        text: The line that failed to parse
        position: Character offset where parsing gave up
        reason: Human-readable description of the failure
    """

    def __init__(self, text: str, position: int, reason: str):
        """Initialize InlineParseError.

        Args:
            text: The line that failed to parse
            position: Character offset where parsing gave up
            reason: Human-readable description of the failure
        """
        self.text = text
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} at offset {position}")


class HistoryUnavailableError(MdExportError):
    """Raised when history cannot be written to durable storage.

    The in-memory history is already updated when this is raised; the next
    successful write persists the full current state.

    Attributes:
        key: Storage key that failed to write
    """

    def __init__(self, key: str, message: str = "History storage unavailable"):
        self.key = key
        self.message = message
        super().__init__(f"{message}: {key}")

