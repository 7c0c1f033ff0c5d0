"""
share-receiver: verification service for shared attestation submissions.
"""
from .version import __version__
from .exceptions import (
    ShareReceiverError, ConfigurationError, InfrastructureError, ReceiptFetchError, LogDecodeError
)
from .models import (
    ValidationError, PerRecordResult, DataRecord, Submission, DecodedLogEvent, DecodedLog,
    Stage, Outcome, VerificationResult
)
from .canonical import canonicalize, canonical_json, content_hash
from .signing import AddressComparison, recover_signer
from .integrity import verify_record
from .pipeline import VerificationPipeline

__all__ = [
    "__version__",
    "ShareReceiverError",
    "ConfigurationError",
    "InfrastructureError",
    "ReceiptFetchError",
    "LogDecodeError",
    "ValidationError",
    "PerRecordResult",
    "DataRecord",
    "Submission",
    "DecodedLogEvent",
    "DecodedLog",
    "Stage",
    "Outcome",
    "VerificationResult",
    "canonicalize",
    "canonical_json",
    "content_hash",
    "AddressComparison",
    "recover_signer",
    "verify_record",
    "VerificationPipeline",
]
