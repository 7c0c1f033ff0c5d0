"""
Signer recovery and address comparison.
"""
import logging
from enum import Enum
from typing import Optional

from eth_account import Account
from eth_keys.exceptions import BadSignature, ValidationError as KeyValidationError
from eth_utils import is_hex_address, to_bytes, to_checksum_address

logger = logging.getLogger(__name__)


class SignatureRecoveryError(ValueError):
    """Raised when a signer cannot be recovered from a hash and signature."""
    pass


class AddressComparison(str, Enum):
    """
    How claimed addresses are compared with recovered or on-chain ones.

    CHECKSUM normalises both sides to their EIP-55 form when they are
    well-formed hex addresses, so letter case never matters. EXACT compares
    the raw strings.
    """
    CHECKSUM = "checksum"
    EXACT = "exact"


def hex_to_bytes(value: str) -> bytes:
    """
    Decode a hex string (with or without 0x prefix) to bytes.

    Raises:
        ValueError: If the value is not valid hex
    """
    try:
        return to_bytes(hexstr=value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid hex string: {e}") from e


def recover_signer(message_hash: bytes, signature: str) -> str:
    """
    Recover the address that signed a 32-byte hash.

    The hash is recovered from directly, without the personal-message prefix.

    Args:
        message_hash: 32-byte hash that was signed
        signature: 65-byte hex signature (r || s || v, v in {0, 1, 27, 28})

    Returns:
        Checksummed signer address

    Raises:
        SignatureRecoveryError: If the hash or signature is malformed
    """
    try:
        return Account._recover_hash(message_hash, signature=hex_to_bytes(signature))
    except (ValueError, TypeError, BadSignature, KeyValidationError) as e:
        logger.debug(f"Signer recovery failed: {e}")
        raise SignatureRecoveryError(f"Could not recover signer: {e}") from e


def normalize_address(value: Optional[str], mode: AddressComparison) -> Optional[str]:
    """Return the form of an address used for comparison under ``mode``"""
    if value is None or mode is AddressComparison.EXACT:
        return value
    if is_hex_address(value):
        return to_checksum_address(value)
    return value


def addresses_match(
    claimed: Optional[str],
    actual: Optional[str],
    mode: AddressComparison = AddressComparison.CHECKSUM
) -> bool:
    """
    Compare two addresses.

    Args:
        claimed: Address claimed by the submission
        actual: Address recovered from a signature or read from chain
        mode: Comparison mode

    Returns:
        True if both are present and equal under ``mode``
    """
    if claimed is None or actual is None:
        return False
    return normalize_address(claimed, mode) == normalize_address(actual, mode)
