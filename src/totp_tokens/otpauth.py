"""Parsing of ``otpauth://totp/...`` key URIs."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, unquote, urlparse

from totp_tokens.accounts import Account
from totp_tokens.hotp import Algorithm
from totp_tokens.totp import (
    DEFAULT_ALGORITHM,
    DEFAULT_DIGITS,
    DEFAULT_PERIOD,
    TokenResult,
    compute_token,
)


SCHEME = "otpauth"
TOTP_TYPE = "totp"


@dataclass(frozen=True)
class OtpAuthUri:
    """The account and token parameters carried by a key URI."""

    label: str
    secret: str
    issuer: Optional[str] = None
    period: int = DEFAULT_PERIOD
    digits: int = DEFAULT_DIGITS
    algorithm: Algorithm = DEFAULT_ALGORITHM

    @property
    def name(self) -> str:
        """Display name, prefixed with the issuer when the label lacks it."""
        if self.issuer and not self.label.startswith(f"{self.issuer}:"):
            return f"{self.issuer}:{self.label}" if self.label else self.issuer
        return self.label

    def to_account(self) -> Account:
        return Account(name=self.name, secret=self.secret)

    def compute_token(self, for_time: Optional[float] = None) -> TokenResult:
        return compute_token(
            self.secret, self.period, self.digits, self.algorithm, for_time=for_time
        )


def is_otpauth_uri(text: str) -> bool:
    return text.strip().lower().startswith(f"{SCHEME}://")


def parse_otpauth_uri(uri: str) -> OtpAuthUri:
    """
    Parse a TOTP key URI as produced by authenticator QR codes.

    Args:
        uri: A URI such as ``otpauth://totp/Issuer:alice?secret=...``.

    Returns:
        The parsed URI with defaults filled in for missing parameters.

    Raises:
        ValueError: If the URI is not a TOTP key URI, lacks a secret, or has
            invalid period, digits or algorithm values.
    """
    parsed = urlparse(uri.strip())
    if parsed.scheme.lower() != SCHEME:
        raise ValueError(f"Not an otpauth URI: scheme is {parsed.scheme!r}")
    if parsed.netloc.lower() != TOTP_TYPE:
        raise ValueError(f"Unsupported OTP type {parsed.netloc!r}; only 'totp' is supported")

    qs = parse_qs(parsed.query)
    secret = qs.get("secret", [None])[0]
    if not secret:
        raise ValueError("otpauth URI missing 'secret=' parameter")

    label = unquote(parsed.path.lstrip("/"))
    issuer = qs.get("issuer", [None])[0]

    return OtpAuthUri(
        label=label,
        secret=secret,
        issuer=issuer,
        period=_int_param(qs, "period", DEFAULT_PERIOD),
        digits=_int_param(qs, "digits", DEFAULT_DIGITS),
        algorithm=Algorithm.parse(qs.get("algorithm", [DEFAULT_ALGORITHM])[0]),
    )


def _int_param(qs: dict, key: str, default: int) -> int:
    raw_value = qs.get(key, [None])[0]
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except ValueError as e:
        raise ValueError(f"Invalid {key} in otpauth URI: {raw_value!r}") from e
    if value < 1:
        raise ValueError(f"Invalid {key} in otpauth URI: must be positive")
    return value
