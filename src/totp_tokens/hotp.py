"""RFC 4226 HOTP (HMAC-based One-Time Password) implementation."""

from enum import Enum
from typing import Union

from cryptography.hazmat.primitives import hashes, hmac

from totp_tokens.base32 import decode_base32


MAX_COUNTER = 2**64


class Algorithm(str, Enum):
    """Hash algorithms supported for the HMAC step."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @classmethod
    def parse(cls, value: Union[str, "Algorithm"]) -> "Algorithm":
        """
        Resolve an algorithm from an enum member or a name.

        Names are case-insensitive and may contain a dash ("sha-256").

        Raises:
            ValueError: If the algorithm is not supported.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().upper().replace("-", "")
            if name in cls.__members__:
                return cls[name]
        raise ValueError(f"Unsupported hash algorithm: {value!r}")

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Return the ``cryptography`` hash instance for this algorithm."""
        return _HASHES[self]()


_HASHES = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


def generate_hotp(
    secret: Union[str, bytes],
    counter: int,
    digits: int = 6,
    algorithm: Union[str, Algorithm] = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code using RFC 4226.

    Args:
        secret: The HOTP secret as a Base32 string or raw key bytes.
        counter: The moving counter value, an unsigned 64-bit integer.
        digits: Number of digits in the output code (default: 6).
        algorithm: Hash algorithm for the HMAC (default: SHA1).

    Returns:
        A zero-padded HOTP code string.

    Raises:
        DecodeError: If a string secret is not valid Base32.
        ValueError: If the counter, digits or algorithm is out of range.
    """
    hash_algorithm = Algorithm.parse(algorithm).hash_algorithm()
    if isinstance(digits, bool) or not isinstance(digits, int) or digits < 1:
        raise ValueError(f"Digits must be a positive integer, got {digits}")
    if not 0 <= counter < MAX_COUNTER:
        raise ValueError(f"Counter must be an unsigned 64-bit integer, got {counter}")

    if isinstance(secret, (bytes, bytearray)):
        raw_secret = bytes(secret)
    else:
        raw_secret = decode_base32(secret)

    # Convert counter to 8-byte big-endian integer
    counter_bytes = counter.to_bytes(8, byteorder="big")

    mac = hmac.HMAC(raw_secret, hash_algorithm)
    mac.update(counter_bytes)
    digest = mac.finalize()

    return format_code(truncate(digest), digits)


def truncate(digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation (Section 5.3) to an HMAC digest.

    Returns:
        The 31-bit integer selected by the low nibble of the last byte.
    """
    offset = digest[-1] & 0x0F
    return (
        ((digest[offset] & 0x7F) << 24)
        | ((digest[offset + 1] & 0xFF) << 16)
        | ((digest[offset + 2] & 0xFF) << 8)
        | (digest[offset + 3] & 0xFF)
    )


def format_code(value: int, digits: int) -> str:
    """Reduce ``value`` to ``digits`` decimal digits, zero-padded."""
    code = value % (10**digits)
    return f"{code:0{digits}d}"
