"""
Verification stages for share submissions.

Every stage evaluates all of the checks it owns and returns the failures as
a list; nothing in this module raises for a failed check.
"""
import logging
from typing import Any, List, Mapping, Sequence, Tuple

from .canonical import content_hash
from .chain.abi import TRAIT_ATTESTED
from .integrity import RecordVerifier, structure_errors, verify_record
from .models import DataRecord, DecodedLog, PerRecordResult, Submission, ValidationError
from .signing import (
    AddressComparison, SignatureRecoveryError, addresses_match, hex_to_bytes, recover_signer
)

logger = logging.getLogger(__name__)


def is_null_or_whitespace(value: Any) -> bool:
    """True for anything that is not a string with visible content"""
    return not isinstance(value, str) or value.strip() == ""


def validate_request_format(body: Any) -> List[ValidationError]:
    """
    Check that the top-level submission fields are present and non-blank.

    Args:
        body: Parsed JSON request body

    Returns:
        One ValidationError per violated field, in field order
    """
    if not isinstance(body, Mapping):
        body = {}

    errors: List[ValidationError] = []

    for key in ("token", "subject"):
        if is_null_or_whitespace(body.get(key)):
            errors.append(ValidationError(key=key, message=f"{key} must be a non-empty string"))

    data = body.get("data")
    if not isinstance(data, list) or not data:
        errors.append(ValidationError(key="data", message="data must be a non-empty array"))

    for key in ("packedData", "signature"):
        if is_null_or_whitespace(body.get(key)):
            errors.append(ValidationError(key=key, message=f"{key} must be a non-empty string"))

    return errors


def validate_basic_off_chain_properties(
    submission: Submission,
    address_comparison: AddressComparison = AddressComparison.CHECKSUM
) -> List[ValidationError]:
    """
    Check the signer and the content hash of a canonicalized submission.

    Args:
        submission: Canonicalized submission
        address_comparison: How the recovered signer is compared with subject

    Returns:
        Up to two errors, keyed ``subject`` and ``packedData``
    """
    errors: List[ValidationError] = []

    try:
        signer = recover_signer(hex_to_bytes(submission.packed_data), submission.signature)
    except (SignatureRecoveryError, ValueError) as e:
        logger.info(f"Signer recovery failed: {e}")
        signer = None
    if not addresses_match(submission.subject, signer, address_comparison):
        errors.append(ValidationError(
            key="subject",
            message="subject does not match the address that signed packedData"
        ))

    recovered_packed_data = content_hash(submission.data, submission.token)
    if recovered_packed_data != submission.packed_data:
        errors.append(ValidationError(
            key="packedData",
            message="packedData does not match the hash of data and token"
        ))

    return errors


def verify_off_chain_records(
    records: Sequence[Any],
    record_verifier: RecordVerifier = verify_record
) -> List[PerRecordResult]:
    """
    Run the off-chain integrity check on every data record.

    Records missing the fields later stages read are reported without
    invoking ``record_verifier``.

    Returns:
        One result per record, in submission order
    """
    results: List[PerRecordResult] = []
    for record in records:
        errors = structure_errors(record)
        if not errors:
            errors = list(record_verifier(record))
        layer2_hash = record.get("layer2Hash") if isinstance(record, Mapping) else None
        results.append(PerRecordResult(
            layer2Hash=layer2_hash if isinstance(layer2_hash, str) else None,
            errors=errors
        ))
    return results


def validate_on_chain_properties(
    subject: str,
    decoded_logs_and_data: Sequence[Tuple[DataRecord, Sequence[DecodedLog]]],
    address_comparison: AddressComparison = AddressComparison.CHECKSUM
) -> List[ValidationError]:
    """
    Cross-check each record against the TraitAttested event of its transaction.

    Args:
        subject: Claimed top-level subject
        decoded_logs_and_data: (record, decoded logs) pairs in submission order
        address_comparison: How claimed and on-chain addresses are compared

    Returns:
        Errors aggregated across all records
    """
    errors: List[ValidationError] = []

    for record, logs in decoded_logs_and_data:
        trait_attested = next((log for log in logs if log.name == TRAIT_ATTESTED), None)
        if trait_attested is None:
            errors.append(ValidationError(
                key=TRAIT_ATTESTED,
                message=f"Transaction {record.tx} has no {TRAIT_ATTESTED} event"
            ))
            continue

        # subject address must match chain
        if not addresses_match(subject, trait_attested.value_of("subject"), address_comparison):
            errors.append(ValidationError(
                key="subject",
                message=f"subject does not match the on-chain subject of {record.tx}"
            ))

        # shared attester must match chain
        if not addresses_match(record.attester, trait_attested.value_of("attester"), address_comparison):
            errors.append(ValidationError(
                key="attester",
                message=f"attester does not match the on-chain attester of {record.tx}"
            ))

        # shared layer2Hash must match the on-chain dataHash
        if record.layer2_hash != trait_attested.value_of("dataHash"):
            errors.append(ValidationError(
                key="layer2Hash",
                message=f"layer2Hash does not match the on-chain dataHash of {record.tx}"
            ))

    return errors
