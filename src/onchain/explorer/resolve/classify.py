"""Explorer search input classification.

Classifies raw search input as a transaction hash, an address or an ENS name using
pattern matching only. No network access happens here.
"""

import re
from enum import IntEnum
from pydantic import BaseModel, ConfigDict
from web3 import Web3

TRANSACTION_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")
ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class InputKind(IntEnum):
    """Explorer search input kind enumeration.

    Identifies which explorer page an input leads to, and whether it needs resolution.
    """

    transaction_hash = 1
    address = 2
    ens_name = 3
    invalid = 4


class ClassifiedInput(BaseModel):
    """Classified explorer search input.

    Contains the input kind and the normalized input string.
    """

    model_config = ConfigDict(frozen=True)

    kind: InputKind
    value: str


def is_valid_transaction(value: str) -> bool:
    """Check if value is a transaction hash.

    Args:
        value: String to check

    Returns:
        True if value is 0x followed by exactly 64 hex characters
    """
    return value is not None and TRANSACTION_HASH_PATTERN.fullmatch(value) is not None


def is_address(value: str) -> bool:
    """Check if value is an address.

    Mixed case addresses must carry a valid EIP-55 checksum. All lower or all upper
    case addresses are accepted as plain hex.

    Args:
        value: String to check

    Returns:
        True if value is 0x followed by 40 hex characters with a valid checksum
    """
    if value is None or ADDRESS_PATTERN.fullmatch(value) is None:
        return False
    body = value[2:]
    if body == body.lower() or body == body.upper():
        return True
    return Web3.is_checksum_address(value)


def classify(raw: str) -> ClassifiedInput:
    """Classify raw search input.

    Transaction hashes are checked first. They are strictly longer than addresses so the
    order only matters for readability.

    Args:
        raw: Raw user input

    Returns:
        ClassifiedInput with kind and whitespace-stripped value
    """
    value = (raw or "").strip()

    if len(value) == 0:
        return ClassifiedInput(kind=InputKind.invalid, value=value)
    if is_valid_transaction(value):
        return ClassifiedInput(kind=InputKind.transaction_hash, value=value)
    if is_address(value):
        return ClassifiedInput(kind=InputKind.address, value=value)

    return ClassifiedInput(kind=InputKind.ens_name, value=value)
