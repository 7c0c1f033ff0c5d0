"""
Off-chain integrity checks for individual data records.

A record verifier is any callable taking one canonicalized record and
returning the list of ValidationError it finds. ``verify_record`` is the
default; the pipeline accepts any other callable with the same contract.
"""
import logging
import re
from typing import Any, Callable, Dict, List, Mapping

from web3 import Web3
from eth_utils import is_hex_address

from .canonical import canonical_json, canonicalize
from .models import ValidationError

logger = logging.getLogger(__name__)

RecordVerifier = Callable[[Dict[str, Any]], List[ValidationError]]

REQUIRED_RECORD_FIELDS = ("tx", "layer2Hash", "attester")

_BYTES32_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def is_bytes32_hex(value: Any) -> bool:
    """Check that a value is a 0x-prefixed 32-byte hex string"""
    return isinstance(value, str) and bool(_BYTES32_RE.match(value))


def structure_errors(record: Any) -> List[ValidationError]:
    """
    Check that a record is a mapping carrying the fields the on-chain
    comparison reads.
    """
    if not isinstance(record, Mapping):
        return [ValidationError(key="data", message="Data record must be an object")]
    return [
        ValidationError(key=field, message=f"Data record is missing a string '{field}'")
        for field in REQUIRED_RECORD_FIELDS
        if not isinstance(record.get(field), str) or not record[field].strip()
    ]


def _keccak_concat(*parts: bytes) -> bytes:
    return bytes(Web3.keccak(b"".join(parts)))


def _verify_root_hash(record: Mapping[str, Any]) -> List[ValidationError]:
    errors: List[ValidationError] = []
    root_hash = record["rootHash"]
    nonce = record["rootHashNonce"]
    if not is_bytes32_hex(root_hash):
        errors.append(ValidationError(key="rootHash", message="rootHash must be a 32-byte hex string"))
    if not is_bytes32_hex(nonce):
        errors.append(ValidationError(key="rootHashNonce", message="rootHashNonce must be a 32-byte hex string"))
    if errors or not is_bytes32_hex(record["layer2Hash"]):
        return errors

    expected = Web3.to_hex(_keccak_concat(bytes.fromhex(root_hash[2:]), bytes.fromhex(nonce[2:])))
    if expected != record["layer2Hash"].lower():
        errors.append(ValidationError(
            key="layer2Hash",
            message="layer2Hash does not match keccak256(rootHash, rootHashNonce)"
        ))
    return errors


def _verify_proof(record: Mapping[str, Any]) -> List[ValidationError]:
    proof = record["proof"]
    root_hash = record.get("rootHash")
    if not isinstance(proof, list) or not is_bytes32_hex(root_hash):
        return [ValidationError(key="proof", message="Merkle proof requires a proof list and a rootHash")]

    node = _keccak_concat(canonical_json(canonicalize(record["target"])).encode("utf-8"))
    for step in proof:
        if (
            not isinstance(step, Mapping)
            or step.get("position") not in ("left", "right")
            or not is_bytes32_hex(step.get("data"))
        ):
            return [ValidationError(key="proof", message="Malformed Merkle proof step")]
        sibling = bytes.fromhex(step["data"][2:])
        if step["position"] == "left":
            node = _keccak_concat(sibling, node)
        else:
            node = _keccak_concat(node, sibling)

    if Web3.to_hex(node) != root_hash.lower():
        return [ValidationError(key="proof", message="Merkle proof does not resolve to rootHash")]
    return []


def verify_record(record: Dict[str, Any]) -> List[ValidationError]:
    """
    Default off-chain integrity check for one data record.

    Checks the hash and address formats of the record, then, when present,
    the rootHash/rootHashNonce derivation of layer2Hash and the Merkle proof
    of ``target`` against rootHash.

    Args:
        record: Canonicalized data record carrying tx, layer2Hash and attester

    Returns:
        List of ValidationError; empty when the record is consistent
    """
    errors: List[ValidationError] = []

    if not is_bytes32_hex(record["tx"]):
        errors.append(ValidationError(key="tx", message="tx must be a 32-byte hex transaction hash"))
    if not is_bytes32_hex(record["layer2Hash"]):
        errors.append(ValidationError(key="layer2Hash", message="layer2Hash must be a 32-byte hex string"))
    if not is_hex_address(record["attester"]):
        errors.append(ValidationError(key="attester", message="attester must be a hex address"))

    if "rootHash" in record and "rootHashNonce" in record:
        errors.extend(_verify_root_hash(record))
    if "target" in record and "proof" in record:
        errors.extend(_verify_proof(record))

    if errors:
        logger.debug(f"Record {record.get('layer2Hash')} failed {len(errors)} integrity check(s)")
    return errors
