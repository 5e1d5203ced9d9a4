"""Input format errors raised while building a board snapshot."""

from enum import Enum
from typing import Any, Dict, Optional


class FormatErrorKind(str, Enum):
    MALFORMED_KEY = "MALFORMED_KEY"
    OUT_OF_RANGE = "OUT_OF_RANGE"


class FormatError(ValueError):
    """
    The upstream probability map violates the input contract.

    Attributes:
        kind: Which part of the contract was violated.
        key: The offending key as supplied by the caller.
        value: The offending value (None for malformed keys).
    """

    kind: FormatErrorKind

    def __init__(self, message: str, key: Any = None, value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key
        self.value = value

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Return a JSON-serialisable description of the error."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "key": None if self.key is None else str(self.key),
        }


class MalformedKeyError(FormatError):
    """A key could not be parsed as a "<row>,<col>" coordinate."""

    kind = FormatErrorKind.MALFORMED_KEY


class OutOfRangeError(FormatError):
    """A probability is not a real number in [0, 1]."""

    kind = FormatErrorKind.OUT_OF_RANGE
