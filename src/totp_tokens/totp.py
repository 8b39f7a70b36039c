"""RFC 6238 TOTP (Time-based One-Time Password) token generation."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from totp_tokens.base32 import DecodeError
from totp_tokens.hotp import Algorithm, generate_hotp


logger = logging.getLogger(__name__)

DEFAULT_PERIOD = 30
DEFAULT_DIGITS = 6
DEFAULT_ALGORITHM = Algorithm.SHA1

ERROR_TOKEN = "Error"


@dataclass(frozen=True)
class TokenResult:
    """A generated token and the seconds left before it rotates."""

    token: str
    remaining_time: int

    @property
    def is_error(self) -> bool:
        return self.token == ERROR_TOKEN

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "remainingTime": self.remaining_time}


ERROR_RESULT = TokenResult(token=ERROR_TOKEN, remaining_time=0)


def current_timestamp() -> int:
    """Return the current Unix time in whole seconds."""
    return (time.time_ns() // 1_000_000) // 1000


def time_counter(timestamp: int, period: int = DEFAULT_PERIOD) -> int:
    """Return the number of whole periods elapsed at ``timestamp``."""
    return timestamp // period


def remaining_seconds(timestamp: int, period: int = DEFAULT_PERIOD) -> int:
    """Return the seconds left in the period containing ``timestamp``."""
    return period - (timestamp % period)


def generate_totp(
    secret: Union[str, bytes],
    period: int = DEFAULT_PERIOD,
    digits: int = DEFAULT_DIGITS,
    algorithm: Union[str, Algorithm] = DEFAULT_ALGORITHM,
    for_time: Optional[float] = None,
) -> TokenResult:
    """
    Generate a TOTP token for the given secret.

    Args:
        secret: Base32 encoded secret or raw key bytes.
        period: Time-step width in seconds (default: 30).
        digits: Number of digits in the token (default: 6).
        algorithm: Hash algorithm for the HMAC (default: SHA1).
        for_time: Unix time to generate for; the current time when omitted.

    Returns:
        The token and the seconds remaining in its window.

    Raises:
        DecodeError: If the secret is not valid Base32.
        ValueError: If period, digits or algorithm is invalid.
    """
    if isinstance(period, bool) or not isinstance(period, int) or period < 1:
        raise ValueError(f"Period must be a positive integer, got {period}")

    # One snapshot for both the counter and the remaining time
    if for_time is None:
        timestamp = current_timestamp()
    else:
        timestamp = int(for_time // 1)

    counter = time_counter(timestamp, period)
    token = generate_hotp(secret, counter, digits, algorithm)
    remaining = remaining_seconds(timestamp, period)
    logger.debug("Generated TOTP token for counter %d, %ds remaining", counter, remaining)
    return TokenResult(token=token, remaining_time=remaining)


def compute_token(
    secret: Union[str, bytes],
    period: int = DEFAULT_PERIOD,
    digits: int = DEFAULT_DIGITS,
    algorithm: Union[str, Algorithm] = DEFAULT_ALGORITHM,
    for_time: Optional[float] = None,
) -> TokenResult:
    """
    Generate a TOTP token, returning ``ERROR_RESULT`` instead of raising.

    A malformed secret or unsupported parameter degrades to the
    ``("Error", 0)`` sentinel so callers can render it per item.
    """
    try:
        return generate_totp(secret, period, digits, algorithm, for_time)
    except DecodeError:
        logger.warning("Error generating TOTP token: invalid Base32 secret")
    except ValueError as e:
        logger.warning("Error generating TOTP token: %s", e)
    except Exception:
        logger.exception("Error generating TOTP token")
    return ERROR_RESULT
