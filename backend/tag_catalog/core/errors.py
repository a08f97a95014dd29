from __future__ import annotations


class InvalidTagBatchError(ValueError):
    """Raised when an ingestion request does not carry a usable batch of tags."""


class TagStorageError(RuntimeError):
    """Raised when the tag store fails for reasons other than a duplicate name.

    ``added_count`` records how many tags were committed by the failing
    ingestion call before the error surfaced.
    """

    def __init__(self, message: str, *, added_count: int = 0) -> None:
        super().__init__(message)
        self.added_count = added_count
