"""
Codec exceptions.

All of them derive from ValueError so callers that already guard codec calls
with ``except ValueError`` keep working.
"""


class HashidError(ValueError):
    """Base exception for codec operations."""

    pass


class InvalidAlphabetError(HashidError):
    """Raised when an alphabet is too short or contains whitespace."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid alphabet: {reason}")


class EmptyInputError(HashidError):
    """Raised when encode is called without any numbers."""

    def __init__(self):
        super().__init__("At least one number is required to encode")


class NegativeOrNonIntegerError(HashidError):
    """Raised when a value to encode is not a non-negative integer."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Only non-negative integers can be encoded, got {value!r}")


class UnknownCharacterError(HashidError):
    def __init__(self, character: str):
        self.character = character
        super().__init__(f"Character {character!r} is not part of the alphabet")


class InvalidHexError(HashidError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Not a hexadecimal string: {value!r}")
