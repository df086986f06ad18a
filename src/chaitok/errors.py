"""Custom exception hierarchy for chaitok tokenization errors."""

from .types import TokenId


class ChaiTokError(Exception):
    """Base exception for all chaitok errors."""


class VocabularyError(ChaiTokError):
    """Raised when an id cannot be resolved against the vocabulary."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        invalid_id: TokenId | None = None,
    ) -> None:
        """Initialize with optional id and vocab_size that get appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # decoding: id with no vocabulary entry and no character
        if invalid_id is not None:
            extra += f"(invalid id: {invalid_id}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.invalid_id = invalid_id


class ConfigError(ChaiTokError):
    """Raised when a tokenizer option or mode name is invalid."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name is not None:
            extra += f"(available: {available}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available


class VocabLoadError(ChaiTokError):
    """Raised when reading a vocabulary file fails."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        format_mismatch: tuple[str, str] | None = None,
    ) -> None:
        extra = " "
        if path:
            extra += f"(path: {path}) "
        if format_mismatch is not None:
            extra += f"(expected: {format_mismatch[1]}) (got {format_mismatch[0]}) "
        super().__init__(message + extra)
        self.path = path
        self.format_mismatch = format_mismatch
