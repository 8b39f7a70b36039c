"""RFC 4648 Base32 decoding for TOTP shared secrets."""

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
PADDING = "="

# Lowercase maps to the same values so decoding is case-insensitive
_SYMBOLS = {char: value for value, char in enumerate(ALPHABET)}
_SYMBOLS.update({char.lower(): value for char, value in list(_SYMBOLS.items())})


class DecodeError(ValueError):
    """Raised when a Base32 secret is malformed."""


def decode_base32(text: str) -> bytes:
    """
    Decode a Base32 secret into raw key bytes.

    Padding is optional, and a length that is not a multiple of 8 is
    accepted as long as every symbol contributes to a whole byte.

    Args:
        text: The Base32 encoded secret (case-insensitive).

    Returns:
        The decoded key bytes.

    Raises:
        DecodeError: If the secret is empty, contains characters outside the
            Base32 alphabet, or has a length that cannot be packed into bytes.
    """
    if not isinstance(text, str):
        raise DecodeError(f"Base32 secret must be a string, not {type(text).__name__}")

    symbols = text.rstrip(PADDING)
    if not symbols:
        raise DecodeError("Base32 secret is empty")

    buffer = 0
    bits = 0
    output = bytearray()
    for position, char in enumerate(symbols):
        try:
            value = _SYMBOLS[char]
        except KeyError:
            raise DecodeError(
                f"Invalid Base32 character {char!r} at position {position}"
            ) from None

        buffer = ((buffer << 5) | value) & 0xFFF
        bits += 5
        if bits >= 8:
            bits -= 8
            output.append((buffer >> bits) & 0xFF)

    # A single trailing symbol carries 5 bits and never completes a byte
    if len(symbols) % 8 == 1:
        raise DecodeError(
            f"Invalid Base32 length: {len(symbols)} symbols cannot be packed into bytes"
        )

    return bytes(output)


def is_valid_base32_secret(text: str) -> bool:
    """Return True if ``text`` decodes as a Base32 secret."""
    try:
        decode_base32(text)
    except DecodeError:
        return False
    return True
