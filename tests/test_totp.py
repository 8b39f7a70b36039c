"""Tests for TOTP token generation."""

import base64
import logging
from unittest.mock import patch

import pytest

from totp_tokens.base32 import DecodeError
from totp_tokens.hotp import Algorithm
from totp_tokens.totp import (
    ERROR_RESULT,
    TokenResult,
    compute_token,
    current_timestamp,
    generate_totp,
    remaining_seconds,
    time_counter,
)


# RFC 6238 seeds: the ASCII digits repeated to the hash output size
SECRETS = {
    Algorithm.SHA1: base64.b32encode(b"12345678901234567890").decode("ascii"),
    Algorithm.SHA256: base64.b32encode(b"12345678901234567890123456789012").decode("ascii"),
    Algorithm.SHA512: base64.b32encode(b"1234567890" * 6 + b"1234").decode("ascii"),
}

# RFC 6238 test vectors (Appendix B), 8 digits
RFC6238_TEST_VECTORS = [
    # (time, sha1, sha256, sha512)
    (59, "94287082", "46119246", "90693936"),
    (1111111109, "07081804", "68084774", "25091201"),
    (1111111111, "14050471", "67062674", "99943326"),
    (1234567890, "89005924", "91819424", "93441116"),
    (2000000000, "69279037", "90698825", "38618901"),
    (20000000000, "65353130", "77737706", "47863826"),
]

SECRET = SECRETS[Algorithm.SHA1]


def test_rfc_secret_encoding():
    assert SECRET == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.mark.parametrize("for_time,sha1,sha256,sha512", RFC6238_TEST_VECTORS)
def test_rfc6238_test_vectors(for_time, sha1, sha256, sha512):
    """Test TOTP generation against RFC 6238 test vectors."""
    for algorithm, expected in (
        (Algorithm.SHA1, sha1),
        (Algorithm.SHA256, sha256),
        (Algorithm.SHA512, sha512),
    ):
        result = generate_totp(
            SECRETS[algorithm], period=30, digits=8, algorithm=algorithm, for_time=for_time
        )
        assert result.token == expected, f"{algorithm.value} at {for_time}"


def test_compute_token_current_time():
    """Test that the default call yields a 6-digit token and a valid countdown."""
    result = compute_token(SECRET, 30, 6, "SHA1")

    assert isinstance(result.token, str)
    assert len(result.token) == 6
    assert result.token.isdigit()
    assert 0 <= result.remaining_time <= 30


def test_compute_token_uses_wall_clock():
    """Test that the clock is read once and reused for token and countdown."""
    with patch("totp_tokens.totp.current_timestamp", return_value=59) as mock_timestamp:
        result = compute_token(SECRET, digits=8)

    mock_timestamp.assert_called_once_with()
    assert result == TokenResult(token="94287082", remaining_time=1)


def test_current_timestamp_floors_milliseconds():
    with patch("totp_tokens.totp.time.time_ns", return_value=1_234_567_890_999_999_999):
        assert current_timestamp() == 1234567890


def test_same_window_same_token():
    """Test that tokens are stable within a period and change across periods."""
    start = compute_token(SECRET, for_time=1111111080)
    end = compute_token(SECRET, for_time=1111111109.9)
    following = compute_token(SECRET, for_time=1111111110)

    assert start.token == end.token
    assert start.remaining_time == 30
    assert end.remaining_time == 1
    assert following.token != start.token
    assert following.remaining_time == 30


def test_remaining_time():
    """Test the countdown arithmetic."""
    assert remaining_seconds(59, 30) == 1
    assert remaining_seconds(60, 30) == 30
    assert remaining_seconds(1111111111, 30) == 29
    assert remaining_seconds(100, 60) == 20


def test_time_counter():
    assert time_counter(0, 30) == 0
    assert time_counter(59, 30) == 1
    assert time_counter(60, 30) == 2
    assert time_counter(1234567890, 30) == 41152263


def test_custom_period():
    """Test that the period changes the counter and countdown."""
    result = generate_totp(SECRET, period=60, digits=8, for_time=119)
    # Counter 1, same as the 30 second window at time 59
    assert result.token == "94287082"
    assert result.remaining_time == 1


def test_generate_totp_raises_for_invalid_secret():
    with pytest.raises(DecodeError):
        generate_totp("INVALID_SECRET!@#", for_time=59)


def test_generate_totp_rejects_non_positive_period():
    with pytest.raises(ValueError, match="Period must be a positive integer"):
        generate_totp(SECRET, period=0, for_time=59)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"secret": "INVALID_SECRET!@#"},
        {"secret": ""},
        {"secret": None},
        {"secret": SECRET, "algorithm": "MD5"},
        {"secret": SECRET, "period": 0},
        {"secret": SECRET, "period": -30},
        {"secret": SECRET, "digits": 0},
        {"secret": SECRET, "digits": "6"},
    ],
)
def test_compute_token_returns_error_sentinel(kwargs):
    """Test that failures map to the error sentinel instead of raising."""
    result = compute_token(for_time=59, **kwargs)

    assert result == ERROR_RESULT
    assert result.token == "Error"
    assert result.remaining_time == 0
    assert result.is_error


def test_compute_token_logs_failures(caplog):
    """Test that failures are logged without the secret."""
    with caplog.at_level(logging.WARNING, logger="totp_tokens.totp"):
        compute_token("SECRET!@", for_time=59)

    assert "Error generating TOTP token" in caplog.text
    assert "SECRET!@" not in caplog.text


def test_long_digit_count():
    """Test that more than 9 digits is permitted and zero-padded."""
    result = generate_totp(SECRET, digits=10, for_time=59)
    assert len(result.token) == 10
    assert result.token.endswith("94287082")


def test_token_result_to_dict():
    result = TokenResult(token="000042", remaining_time=17)
    assert result.to_dict() == {"token": "000042", "remainingTime": 17}
    assert not result.is_error


def test_compute_token_does_not_log_secret_characters(caplog):
    """Test that the offending character of a mistyped secret is not logged."""
    with caplog.at_level(logging.WARNING, logger="totp_tokens.totp"):
        compute_token("SECRET!@", for_time=59)

    assert "invalid Base32 secret" in caplog.text
    assert "'!'" not in caplog.text
    assert "position" not in caplog.text


@pytest.mark.parametrize("period", [1.5, 30.0, "30", True])
def test_non_integer_period(period):
    """Test that a non-integer period is a ValueError, and the sentinel when fail-soft."""
    with pytest.raises(ValueError, match="Period must be a positive integer"):
        generate_totp(SECRET, period=period, for_time=59)

    assert compute_token(SECRET, period=period, for_time=59) == ERROR_RESULT
