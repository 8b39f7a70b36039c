"""Token generation for a list of named accounts."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from totp_tokens.base32 import DecodeError
from totp_tokens.totp import ERROR_RESULT, TokenResult, current_timestamp, generate_totp


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Account:
    """A display name and its Base32 secret."""

    name: str
    secret: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Account":
        """
        Build an account from a ``{"name": ..., "secret": ...}`` mapping.

        Raises:
            ValueError: If the mapping has no secret.
        """
        try:
            secret = data["secret"]
        except KeyError as e:
            raise ValueError(f"Account entry missing 'secret': {e}") from e
        if not isinstance(secret, str):
            raise ValueError("Account secret must be a string")
        return cls(name=str(data.get("name", "")), secret=secret)


def compute_all_tokens(
    accounts: Iterable[Union[Account, Mapping[str, Any]]],
    for_time: Optional[float] = None,
) -> List[TokenResult]:
    """
    Generate tokens for every account, in input order.

    Uses a 30 second period, 6 digits and SHA1 for all accounts. Each
    account is computed independently: a failure records ``ERROR_RESULT``
    at that position and the remaining accounts still get their tokens.

    Args:
        accounts: Account objects or ``{"name", "secret"}`` mappings.
        for_time: Unix time to generate for; the current time when omitted.

    Returns:
        One result per account, index-aligned with the input.
    """
    # Shared snapshot so identical secrets yield identical results
    timestamp = current_timestamp() if for_time is None else for_time

    results = []
    for index, entry in enumerate(accounts):
        name = f"account #{index}"
        try:
            name = _display_name(entry, index)
            account = entry if isinstance(entry, Account) else Account.from_dict(entry)
            results.append(generate_totp(account.secret, for_time=timestamp))
        except DecodeError:
            logger.error("Failed to generate token for %s: invalid Base32 secret", name)
            results.append(ERROR_RESULT)
        except Exception as e:
            logger.error("Failed to generate token for %s: %s", name, e)
            results.append(ERROR_RESULT)
    return results


def _display_name(entry: Any, index: int) -> str:
    if isinstance(entry, Account):
        return entry.name
    if isinstance(entry, Mapping) and entry.get("name"):
        return str(entry["name"])
    return f"account #{index}"


def load_accounts(path: Union[str, Path]) -> List[Account]:
    """
    Load accounts from a JSON array of ``{"name", "secret"}`` objects.

    Args:
        path: Path to the accounts file.

    Returns:
        Accounts in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON array of account objects.
    """
    accounts_path = Path(path)
    if not accounts_path.exists():
        raise FileNotFoundError(f"Accounts file not found at {accounts_path}")

    try:
        data = json.loads(accounts_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid accounts file format: {e}") from e

    if not isinstance(data, list):
        raise ValueError("Invalid accounts file format: expected a JSON array")

    accounts = []
    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid account entry at index {position}: expected an object")
        # Non-string secrets are kept as-is so token generation reports them
        accounts.append(Account(name=str(entry.get("name", "")), secret=entry.get("secret", "")))
    return accounts
