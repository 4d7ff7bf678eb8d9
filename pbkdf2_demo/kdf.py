from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum

from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import (
    AboveMaximum,
    AlgorithmUnavailable,
    AllocationFailed,
    BelowMinimum,
    DerivationFailed,
    PropertyQueryFailed,
)
from .validation import MAX_HASH_TYPE, MIN_HASH_TYPE, MIN_ITERATION_COUNT


logger = logging.getLogger(__name__)

# The primitive counts iterations in an unsigned 64-bit integer.
MAX_ITERATION_COUNTER = 2**64 - 1


class HashAlgorithmId(Enum):
    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"

    def new_hash(self) -> hashes.HashAlgorithm:
        return _HASH_FACTORIES[self]()

    @property
    def digest_size(self) -> int:
        return self.new_hash().digest_size


_HASH_FACTORIES = {
    HashAlgorithmId.SHA1: hashes.SHA1,
    HashAlgorithmId.SHA256: hashes.SHA256,
    HashAlgorithmId.SHA384: hashes.SHA384,
    HashAlgorithmId.SHA512: hashes.SHA512,
}

# Selector table, indexed by hashType - 1. Index 4 and 5 both select SHA512.
HASH_ALGORITHMS = (
    HashAlgorithmId.SHA1,
    HashAlgorithmId.SHA256,
    HashAlgorithmId.SHA384,
    HashAlgorithmId.SHA512,
    HashAlgorithmId.SHA512,
)


def select_hash_algorithm(hash_type: int) -> HashAlgorithmId:
    """Map the 1-based ``hashType`` selector to its algorithm."""
    if hash_type < MIN_HASH_TYPE:
        raise BelowMinimum("hashType", MIN_HASH_TYPE, hash_type)
    if hash_type > MAX_HASH_TYPE:
        raise AboveMaximum("hashType", MAX_HASH_TYPE, hash_type)
    return HASH_ALGORITHMS[hash_type - 1]


@dataclass(frozen=True)
class DerivationParameters:
    algorithm: HashAlgorithmId
    salt: bytes
    iteration_count: int
    password: bytes = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.algorithm, HashAlgorithmId):
            raise TypeError("Algorithm must be a HashAlgorithmId.")
        if not isinstance(self.salt, bytes) or not isinstance(self.password, bytes):
            raise TypeError("Salt and password must be bytes.")
        if not isinstance(self.iteration_count, int) or isinstance(self.iteration_count, bool):
            raise TypeError("Iteration count must be an integer.")
        if self.iteration_count < MIN_ITERATION_COUNT:
            raise BelowMinimum("iterationCount", MIN_ITERATION_COUNT, self.iteration_count)


class AlgorithmHandle:
    """Scoped handle on the HMAC primitive for one hash algorithm.

    Use it as a context manager; the primitive is released when the block
    exits, whether or not the derivation succeeded.
    """

    def __init__(self, algorithm_id: HashAlgorithmId):
        self.algorithm_id = algorithm_id
        self._algorithm: hashes.HashAlgorithm | None = None
        self._available = False

    @property
    def is_open(self) -> bool:
        return self._available

    def open(self) -> AlgorithmHandle:
        algorithm = self.algorithm_id.new_hash()
        try:
            # Availability check only; PBKDF2HMAC builds its own HMAC.
            hmac.HMAC(b"\x00", algorithm)
        except UnsupportedAlgorithm as e:
            raise AlgorithmUnavailable("HMAC open", e) from e
        self._algorithm = algorithm
        self._available = True
        logger.debug("Opened HMAC-%s", self.algorithm_id.value)
        return self

    def close(self) -> None:
        if self._available:
            logger.debug("Closed HMAC-%s", self.algorithm_id.value)
        self._available = False
        self._algorithm = None

    def __enter__(self) -> AlgorithmHandle:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def hash_length(self) -> int:
        """Native output size of the primitive in bytes."""
        if self._algorithm is None:
            raise PropertyQueryFailed("hash length query", "handle is not open")
        size = getattr(self._algorithm, "digest_size", None)
        if not isinstance(size, int) or size <= 0:
            raise PropertyQueryFailed("hash length query", f"invalid digest size {size!r}")
        return size

    def pbkdf2(self, password: bytes, salt: bytes, iteration_count: int, length: int) -> bytes:
        if self._algorithm is None:
            raise DerivationFailed("PBKDF2 derive", "handle is not open")
        if iteration_count > MAX_ITERATION_COUNTER:
            raise DerivationFailed("PBKDF2 derive", f"iteration count {iteration_count} exceeds 64 bits")

        try:
            kdf = PBKDF2HMAC(
                algorithm=self._algorithm,
                length=length,
                salt=salt,
                iterations=iteration_count,
            )
            return kdf.derive(password)
        except UnsupportedAlgorithm as e:
            raise AlgorithmUnavailable("PBKDF2 derive", e) from e
        except MemoryError as e:
            raise AllocationFailed("hash value", length) from e
        except (ValueError, TypeError, OverflowError, InternalError) as e:
            raise DerivationFailed("PBKDF2 derive", e) from e


def derive_key(params: DerivationParameters) -> bytes:
    """Run one PBKDF2-HMAC derivation; the key is as long as the hash output."""
    with AlgorithmHandle(params.algorithm) as handle:
        key_len = handle.hash_length()
        logger.debug(
            "Deriving %d byte key with PBKDF2-HMAC-%s (salt %d bytes, password %d bytes, %d iterations)",
            key_len,
            params.algorithm.value,
            len(params.salt),
            len(params.password),
            params.iteration_count,
        )
        key = handle.pbkdf2(params.password, params.salt, params.iteration_count, key_len)

    if len(key) != key_len:
        raise DerivationFailed("PBKDF2 derive", f"got {len(key)} bytes, expected {key_len}")
    return key
