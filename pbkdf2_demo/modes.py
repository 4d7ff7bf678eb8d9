from __future__ import annotations
import logging
from enum import Enum

from . import hexcodec
from .kdf import DerivationParameters, HashAlgorithmId, select_hash_algorithm
from .text_encoding import NATIVE_ENCODING, to_native_bytes, to_utf8
from .validation import parse_hash_type, parse_integer_salt, parse_iteration_count


logger = logging.getLogger(__name__)

# Size of the C "int" the naive salt is stored in
INTEGER_SALT_SIZE = 4


class Mode(Enum):
    CORRECT = "correct"  # hex byte-array salt, UTF-8 password
    NAIVE = "naive"      # integer salt, native password bytes


def integer_salt_bytes(salt: int) -> bytes:
    return salt.to_bytes(INTEGER_SALT_SIZE, "little", signed=True)


def validate_arguments(
    mode: Mode,
    hash_type_arg: str,
    salt_arg: str,
    iteration_arg: str,
) -> tuple[HashAlgorithmId, bytes, int]:
    """Check hash type, salt and iteration count, in that order."""
    algorithm = select_hash_algorithm(parse_hash_type(hash_type_arg))

    if mode is Mode.CORRECT:
        salt = hexcodec.decode(salt_arg)
    else:
        salt = integer_salt_bytes(parse_integer_salt(salt_arg))

    iteration_count = parse_iteration_count(iteration_arg)
    return algorithm, salt, iteration_count


def encode_password(mode: Mode, password_arg: str, native_encoding: str = NATIVE_ENCODING) -> bytes:
    if mode is Mode.CORRECT:
        return to_utf8(password_arg)
    return to_native_bytes(password_arg, native_encoding)


def build_parameters(
    mode: Mode,
    hash_type_arg: str,
    salt_arg: str,
    iteration_arg: str,
    password_arg: str,
    native_encoding: str = NATIVE_ENCODING,
) -> DerivationParameters:
    """Turn the raw command-line texts into the exact bytes PBKDF2 gets.

    This is the only place where the two modes differ. Arguments are checked
    in a fixed order (hash type, salt, iteration count, password); the first
    bad one raises.
    """
    algorithm, salt, iteration_count = validate_arguments(mode, hash_type_arg, salt_arg, iteration_arg)
    password = encode_password(mode, password_arg, native_encoding)

    logger.debug(
        "Built %s parameters: %s, salt %d bytes, %d iterations, password %d bytes",
        mode.value,
        algorithm.value,
        len(salt),
        iteration_count,
        len(password),
    )
    return DerivationParameters(
        algorithm=algorithm,
        salt=salt,
        iteration_count=iteration_count,
        password=password,
    )


def describe_salt(mode: Mode, salt: bytes) -> str:
    """The salt as the result line shows it."""
    if mode is Mode.CORRECT:
        return hexcodec.encode(salt)
    return str(int.from_bytes(salt, "little", signed=True))
