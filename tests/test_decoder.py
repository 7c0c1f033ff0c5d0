"""
Tests for receipt log decoding.
"""
import pytest
from hexbytes import HexBytes
from web3 import Web3

from share_receiver.chain import ATTESTATION_LOGIC_ABI, LogDecoder
from share_receiver.exceptions import LogDecodeError
from tests.test_helpers import (
    TEST_ATTESTER, TEST_CONTRACT, TEST_REQUESTER, raw_trait_attested_log, raw_unrelated_log, tx_hash
)

SUBJECT = "0xabcdef0123456789abcdef0123456789abcdef01"
DATA_HASH = Web3.to_hex(Web3.keccak(text="layer2"))


def _trait_log(**kwargs):
    values = dict(subject=SUBJECT, attester=TEST_ATTESTER, data_hash=DATA_HASH, tx=tx_hash(0))
    values.update(kwargs)
    return raw_trait_attested_log(**values)


def test_decode_trait_attested(decoder):
    decoded = decoder.decode_logs([_trait_log()])

    assert len(decoded) == 1
    log = decoded[0]
    assert log.name == "TraitAttested"
    assert log.address == TEST_CONTRACT
    assert [(e.name, e.type) for e in log.events] == [
        ("subject", "address"),
        ("attester", "address"),
        ("requester", "address"),
        ("dataHash", "bytes32"),
    ]
    assert Web3.to_checksum_address(log.value_of("subject")) == Web3.to_checksum_address(SUBJECT)
    assert log.value_of("attester") == TEST_ATTESTER
    assert log.value_of("requester") == TEST_REQUESTER
    assert log.value_of("dataHash") == DATA_HASH
    assert log.value_of("missing") is None


def test_unrelated_logs_are_omitted(decoder):
    logs = [raw_unrelated_log(tx_hash(0), 0), _trait_log(log_index=1), raw_unrelated_log(tx_hash(0), 2)]
    decoded = decoder.decode_logs(logs)
    assert [log.name for log in decoded] == ["TraitAttested"]


def test_logs_without_topics_are_omitted(decoder):
    log = _trait_log()
    log["topics"] = []
    assert decoder.decode_logs([log]) == []


def test_hex_string_topic_is_recognised(decoder):
    log = _trait_log()
    log["topics"] = [Web3.to_hex(log["topics"][0])]
    decoded = decoder.decode_log(log)
    assert [entry.name for entry in decoded] == ["TraitAttested"]
    assert decoded[0].value_of("dataHash") == DATA_HASH


def test_truncated_payload_raises(decoder):
    log = _trait_log()
    log["data"] = HexBytes(bytes(log["data"])[:40])
    with pytest.raises(LogDecodeError):
        decoder.decode_logs([log])


def test_receipt_order_is_kept(decoder):
    first = _trait_log(data_hash=Web3.to_hex(Web3.keccak(text="first")), log_index=0)
    second = _trait_log(data_hash=Web3.to_hex(Web3.keccak(text="second")), log_index=1)
    decoded = decoder.decode_logs([first, second])
    assert [log.value_of("dataHash") for log in decoded] == [
        Web3.to_hex(Web3.keccak(text="first")),
        Web3.to_hex(Web3.keccak(text="second")),
    ]


def test_decoder_keeps_its_own_abi_copy():
    abi = [dict(entry) for entry in ATTESTATION_LOGIC_ABI]
    decoder = LogDecoder(abi)
    abi.clear()
    assert len(decoder.abi) == len(ATTESTATION_LOGIC_ABI)
    assert decoder.decode_logs([_trait_log()])[0].name == "TraitAttested"
