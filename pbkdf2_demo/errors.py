from __future__ import annotations


class PBKDF2DemoError(Exception):
    """Base class for every failure the tool reports to the user."""

    exit_code = 3


class UsageError(PBKDF2DemoError):
    exit_code = 1


# --- validation (exit 2) ---

class ValidationError(PBKDF2DemoError, ValueError):
    exit_code = 2


class NotAnInteger(ValidationError):
    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value
        super().__init__(f'"{name}" is not an integer: {value!r}')


class BelowMinimum(ValidationError):
    def __init__(self, name: str, bound: int, value: int):
        self.name = name
        self.bound = bound
        self.value = value
        super().__init__(f'"{name}" is smaller than minimum value of {bound}: {value}')


class AboveMaximum(ValidationError):
    def __init__(self, name: str, bound: int, value: int):
        self.name = name
        self.bound = bound
        self.value = value
        super().__init__(f'"{name}" is larger than maximum value of {bound}: {value}')


class InvalidHexCharacter(ValidationError):
    def __init__(self, char: str, position: int, text: str):
        self.char = char
        self.position = position
        self.text = text
        super().__init__(
            f"Invalid hex character {char!r} at position {position} of hex string \"{text}\""
        )


# --- resources (exit 3) ---

class ResourceError(PBKDF2DemoError):
    exit_code = 3


class AllocationFailed(ResourceError):
    def __init__(self, what: str, size: int | None = None):
        self.what = what
        self.size = size
        amount = f"{size} bytes" if size is not None else "memory"
        super().__init__(f"Could not allocate {amount} for {what}")


class EncodingConversionFailed(ResourceError):
    def __init__(self, encoding: str, reason: str):
        self.encoding = encoding
        self.reason = reason
        super().__init__(f"Could not convert password to {encoding}: {reason}")


# --- derivation primitive (exit 3) ---

class DerivationError(PBKDF2DemoError):
    """A failing step of the keyed-hash primitive.

    ``status`` is the library exception (or a short code) that caused it and
    ``step`` names the call that failed.
    """

    exit_code = 3

    def __init__(self, step: str, status: object):
        self.step = step
        self.status = status
        super().__init__(f"Error {_describe_status(status)} returned by {step}")


class AlgorithmUnavailable(DerivationError):
    pass


class PropertyQueryFailed(DerivationError):
    pass


class DerivationFailed(DerivationError):
    pass


def _describe_status(status: object) -> str:
    if isinstance(status, BaseException):
        detail = str(status)
        return f"{type(status).__name__}({detail})" if detail else type(status).__name__
    return str(status)
