"""
Tests for signer recovery and address comparison.
"""
import pytest
from eth_account import Account
from web3 import Web3

from share_receiver.signing import (
    AddressComparison, SignatureRecoveryError, addresses_match, hex_to_bytes,
    normalize_address, recover_signer
)
from tests.test_helpers import TEST_PRIV_KEY, TEST_OTHER_PRIV_KEY, sign_hash

MESSAGE_HASH = Web3.to_hex(Web3.keccak(text="share"))


def test_recover_signer_returns_checksummed_signer(test_account):
    signature = sign_hash(MESSAGE_HASH, TEST_PRIV_KEY)
    assert recover_signer(hex_to_bytes(MESSAGE_HASH), signature) == test_account.address


def test_recover_signer_accepts_v_zero_or_one(test_account):
    """Signatures with v in {0, 1} recover the same signer as v in {27, 28}"""
    signature = bytearray(hex_to_bytes(sign_hash(MESSAGE_HASH, TEST_PRIV_KEY)))
    signature[64] -= 27
    assert recover_signer(hex_to_bytes(MESSAGE_HASH), Web3.to_hex(bytes(signature))) == test_account.address


def test_recover_signer_other_key():
    signature = sign_hash(MESSAGE_HASH, TEST_OTHER_PRIV_KEY)
    assert recover_signer(hex_to_bytes(MESSAGE_HASH), signature) == Account.from_key(TEST_OTHER_PRIV_KEY).address


@pytest.mark.parametrize("signature", ["0x1234", "0x" + "11" * 64 + "05", "not-hex"])
def test_recover_signer_malformed_signature(signature):
    with pytest.raises(SignatureRecoveryError):
        recover_signer(hex_to_bytes(MESSAGE_HASH), signature)


def test_recover_signer_rejects_non_hash_message():
    signature = sign_hash(MESSAGE_HASH, TEST_PRIV_KEY)
    with pytest.raises(SignatureRecoveryError):
        recover_signer(b"short", signature)


def test_hex_to_bytes():
    assert hex_to_bytes("0x0102") == b"\x01\x02"
    assert hex_to_bytes("0102") == b"\x01\x02"
    with pytest.raises(ValueError):
        hex_to_bytes("0xZZ")


def test_addresses_match_checksum_mode(test_account):
    address = test_account.address
    assert addresses_match(address, address.lower())
    assert addresses_match(address.lower(), address)
    assert not addresses_match(address, Account.from_key(TEST_OTHER_PRIV_KEY).address)


def test_addresses_match_exact_mode(test_account):
    address = test_account.address
    assert addresses_match(address, address, AddressComparison.EXACT)
    assert not addresses_match(address, address.lower(), AddressComparison.EXACT)


def test_addresses_match_missing_values(test_account):
    assert not addresses_match(test_account.address, None)
    assert not addresses_match(None, test_account.address)
    assert not addresses_match(None, None)


def test_normalize_address_leaves_non_addresses_alone():
    assert normalize_address("alice", AddressComparison.CHECKSUM) == "alice"
    assert normalize_address(None, AddressComparison.CHECKSUM) is None
