"""
Unit tests for input classification in onchain.explorer.resolve.classify
"""

import random
import pytest
from web3 import Web3

from onchain.explorer.resolve.classify import (
    ClassifiedInput,
    InputKind,
    classify,
    is_address,
    is_valid_transaction,
)
from conftest import TX_HASH, VITALIK_ADDRESS


class TestPydanticModels:
    """Test suite for Pydantic model validation."""

    def test_classified_input_creation(self):
        classified = ClassifiedInput(kind=InputKind.ens_name, value="vitalik.eth")
        assert classified.kind == InputKind.ens_name
        assert classified.value == "vitalik.eth"

    def test_classified_input_is_frozen(self):
        classified = ClassifiedInput(kind=InputKind.ens_name, value="vitalik.eth")
        with pytest.raises(Exception):
            classified.value = "other.eth"

    def test_input_kind_enum_values(self):
        assert InputKind.transaction_hash == 1
        assert InputKind.address == 2
        assert InputKind.ens_name == 3
        assert InputKind.invalid == 4


class TestIsValidTransaction:
    """Test suite for transaction hash detection."""

    def test_lower_case_hash(self):
        assert is_valid_transaction(TX_HASH) is True

    def test_upper_case_hash(self):
        assert is_valid_transaction("0x" + "AB" * 32) is True

    def test_wrong_length(self):
        assert is_valid_transaction("0x" + "a" * 63) is False
        assert is_valid_transaction("0x" + "a" * 65) is False

    def test_missing_prefix(self):
        assert is_valid_transaction("ab" * 32) is False

    def test_non_hex(self):
        assert is_valid_transaction("0x" + "g" * 64) is False


class TestIsAddress:
    """Test suite for address detection."""

    def test_checksummed_address(self):
        assert is_address(VITALIK_ADDRESS) is True

    def test_lower_case_address(self):
        assert is_address(VITALIK_ADDRESS.lower()) is True

    def test_bad_checksum(self):
        # Flipping the case of a single letter always breaks an EIP-55 checksum.
        bad = VITALIK_ADDRESS[:4] + VITALIK_ADDRESS[4].upper() + VITALIK_ADDRESS[5:]
        assert bad != VITALIK_ADDRESS
        assert is_address(bad) is False

    def test_missing_prefix(self):
        assert is_address(VITALIK_ADDRESS[2:]) is False

    def test_transaction_hash_is_not_address(self):
        assert is_address(TX_HASH) is False


class TestClassify:
    """Test suite for classify function."""

    def test_transaction_hash(self):
        result = classify(TX_HASH)
        assert result.kind == InputKind.transaction_hash
        assert result.value == TX_HASH

    def test_address(self):
        result = classify(VITALIK_ADDRESS)
        assert result.kind == InputKind.address
        assert result.value == VITALIK_ADDRESS

    def test_ens_name(self):
        result = classify("vitalik.eth")
        assert result.kind == InputKind.ens_name
        assert result.value == "vitalik.eth"

    def test_whitespace_is_stripped(self):
        result = classify("  vitalik.eth \n")
        assert result.kind == InputKind.ens_name
        assert result.value == "vitalik.eth"

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_input_is_invalid(self, raw):
        assert classify(raw).kind == InputKind.invalid

    def test_unprefixed_hex_is_ens_name(self):
        assert classify(VITALIK_ADDRESS[2:]).kind == InputKind.ens_name

    def test_near_miss_hash_is_ens_name(self):
        assert classify("0x" + "a" * 63).kind == InputKind.ens_name

    def test_classify_is_deterministic(self):
        assert classify(VITALIK_ADDRESS) == classify(VITALIK_ADDRESS)


def random_hex(rng: random.Random, length: int) -> str:
    return "".join(rng.choice("0123456789abcdef") for _ in range(length))


RNG = random.Random(20261018)
RANDOM_HASHES = [random_hex(RNG, 64) for _ in range(8)]
RANDOM_ADDRESSES = [random_hex(RNG, 40) for _ in range(8)]


class TestClassifyProperties:
    """Every 0x + 64 hex string is a transaction hash, every 0x + 40 hex string an address."""

    @pytest.mark.parametrize("body", RANDOM_HASHES)
    @pytest.mark.parametrize("case", [str.lower, str.upper])
    def test_any_hash_is_transaction(self, body, case):
        value = "0x" + case(body)
        result = classify(value)
        assert result.kind == InputKind.transaction_hash
        assert result.value == value

    @pytest.mark.parametrize("body", RANDOM_ADDRESSES)
    @pytest.mark.parametrize("case", [str.lower, str.upper])
    def test_any_plain_address_is_address(self, body, case):
        value = "0x" + case(body)
        result = classify(value)
        assert result.kind == InputKind.address
        assert result.value == value

    @pytest.mark.parametrize("body", RANDOM_ADDRESSES)
    def test_any_checksummed_address_is_address(self, body):
        value = Web3.to_checksum_address("0x" + body)
        assert classify(value).kind == InputKind.address

    @pytest.mark.parametrize("body", RANDOM_ADDRESSES)
    def test_any_broken_checksum_is_not_address(self, body):
        value = Web3.to_checksum_address("0x" + body)
        letters = [i for i, c in enumerate(value) if i > 1 and c.isalpha()]
        if not letters:
            pytest.skip("address has no letters to flip")
        i = letters[0]
        broken = value[:i] + value[i].swapcase() + value[i + 1:]
        if broken[2:] in (broken[2:].lower(), broken[2:].upper()):
            pytest.skip("flipping left the address in a single case")
        assert classify(broken).kind == InputKind.ens_name
