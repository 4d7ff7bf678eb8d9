from __future__ import annotations

from .errors import AboveMaximum, BelowMinimum, NotAnInteger


MIN_HASH_TYPE = 1
MAX_HASH_TYPE = 5

# Bounds of the salt when it is taken as a (32-bit signed) integer
MIN_SALT = 0
MAX_SALT = 2**31 - 1

MIN_ITERATION_COUNT = 1
MAX_ITERATION_COUNT = 5_000_000


def parse_bounded_integer(name: str, raw_text: str, minimum: int, maximum: int) -> int:
    """Parse ``raw_text`` as a decimal integer within [minimum, maximum]."""
    if not isinstance(raw_text, str) or not raw_text.isascii():
        # int() would take other Unicode digits, e.g. full-width ones
        raise NotAnInteger(name, raw_text)
    try:
        value = int(raw_text, 10)
    except ValueError as e:
        raise NotAnInteger(name, raw_text) from e

    if value < minimum:
        raise BelowMinimum(name, minimum, value)
    if value > maximum:
        raise AboveMaximum(name, maximum, value)
    return value


def parse_hash_type(raw_text: str) -> int:
    return parse_bounded_integer("hashType", raw_text, MIN_HASH_TYPE, MAX_HASH_TYPE)


def parse_integer_salt(raw_text: str) -> int:
    return parse_bounded_integer("salt", raw_text, MIN_SALT, MAX_SALT)


def parse_iteration_count(raw_text: str) -> int:
    return parse_bounded_integer("iterationCount", raw_text, MIN_ITERATION_COUNT, MAX_ITERATION_COUNT)
