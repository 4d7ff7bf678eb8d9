from __future__ import annotations

from .errors import InvalidHexCharacter


HEX_DIGITS = "0123456789ABCDEFabcdef"


def encode(data: bytes) -> str:
    """Uppercase hex, one blank between bytes: b"\\x00\\x10" -> "00 10"."""
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("Data must be bytes.")
    return bytes(data).hex(" ").upper()


def decode(text: str) -> bytes:
    """Parse unseparated hex digit pairs into bytes.

    An odd number of digits is accepted: the first digit becomes the low
    nibble of a leading byte, so "A" decodes to b"\\x0a".
    """
    for position, char in enumerate(text, start=1):
        if char not in HEX_DIGITS:
            raise InvalidHexCharacter(char, position, text)

    if len(text) % 2:
        text = "0" + text
    return bytes.fromhex(text)
