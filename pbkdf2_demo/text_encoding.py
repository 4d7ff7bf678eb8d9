from __future__ import annotations
import codecs
import logging

from .errors import AllocationFailed, EncodingConversionFailed


logger = logging.getLogger(__name__)

# In-memory representation of a wide-character string on the platform the
# naive demonstration imitates.
NATIVE_ENCODING = "utf-16-le"


def to_utf8(password: str) -> bytes:
    """Return the canonical UTF-8 bytes of ``password``."""
    if not isinstance(password, str):
        raise TypeError("Password must be str.")

    try:
        encoded = password.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates, e.g. from command-line bytes that were not valid
        # in the locale encoding.
        raise EncodingConversionFailed("UTF-8", str(e)) from e
    except MemoryError as e:
        raise AllocationFailed("password in UTF-8") from e

    logger.debug("Password converted to UTF-8 (%d chars -> %d bytes)", len(password), len(encoded))
    return encoded


def to_native_bytes(password: str, native_encoding: str = NATIVE_ENCODING) -> bytes:
    """Return the password's in-memory code units as raw bytes.

    This is the wrong way to feed a password into a KDF: the result depends
    on how the platform happens to store characters. It is kept as it is.
    """
    if not isinstance(password, str):
        raise TypeError("Password must be str.")

    try:
        codec = codecs.lookup(native_encoding).name
    except LookupError as e:
        raise EncodingConversionFailed(native_encoding, str(e)) from e

    if codec.startswith("utf-16") or codec.startswith("utf-32"):
        # A wide-character buffer holds unpaired surrogates as they are.
        raw = password.encode(native_encoding, errors="surrogatepass")
    else:
        # An "ANSI" buffer: what the code page cannot hold is already lost.
        raw = password.encode(native_encoding, errors="replace")

    logger.debug("Password taken as native %s bytes (%d chars -> %d bytes)", codec, len(password), len(raw))
    return raw
