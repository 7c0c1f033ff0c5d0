"""
The share verification pipeline.

Stages run in a fixed order and the first failing stage ends the run with
its own errors only:

1. format          - required top-level fields are present
2. off_chain       - signer and content hash match the claim
3. data_integrity  - every data record is internally consistent
4. on_chain        - every referenced transaction recorded a matching event
"""
import logging
from typing import Any, Optional

from .canonical import canonicalize
from .chain.fetcher import OnChainLogFetcher
from .integrity import RecordVerifier, verify_record
from .models import DataRecord, Stage, Submission, VerificationResult
from .signing import AddressComparison
from .validation import (
    validate_basic_off_chain_properties,
    validate_on_chain_properties,
    validate_request_format,
    verify_off_chain_records,
)

logger = logging.getLogger(__name__)


def _token_hint(token: Any) -> str:
    """Truncated token for log lines"""
    return f"{str(token)[:8]}…" if token else "<none>"


class VerificationPipeline:
    """
    Decides whether a share submission is authentic.

    The pipeline holds no per-request state; one instance serves every
    request of the process.
    """

    def __init__(
        self,
        fetcher: OnChainLogFetcher,
        address_comparison: AddressComparison = AddressComparison.CHECKSUM,
        record_verifier: RecordVerifier = verify_record,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the pipeline

        Args:
            fetcher: Fetcher used to read decoded receipt logs
            address_comparison: How addresses are compared
            record_verifier: Off-chain integrity check for one data record
            logger: Optional logger instance
        """
        self.fetcher = fetcher
        self.address_comparison = address_comparison
        self.record_verifier = record_verifier
        self.logger = logger or logging.getLogger(__name__)

    def _reject(self, stage: Stage, errors, token: Any) -> VerificationResult:
        self.logger.info(f"Share {_token_hint(token)} rejected at {stage.value} with {len(errors)} error(s)")
        return VerificationResult.rejected(stage, errors)

    async def verify(self, body: Any) -> VerificationResult:
        """
        Run every stage against a raw submission body.

        Args:
            body: Parsed JSON request body

        Returns:
            ACCEPTED with the submitted token, or REJECTED with the failing
            stage and its errors

        Raises:
            InfrastructureError: If receipts cannot be fetched or decoded
        """
        format_errors = validate_request_format(body)
        if format_errors:
            token = body.get("token") if isinstance(body, dict) else None
            return self._reject(Stage.FORMAT, format_errors, token)

        original_token = body["token"]
        submission = Submission.model_validate(canonicalize(body))

        off_chain_errors = validate_basic_off_chain_properties(submission, self.address_comparison)
        if off_chain_errors:
            return self._reject(Stage.OFF_CHAIN, off_chain_errors, original_token)

        record_results = verify_off_chain_records(submission.data, self.record_verifier)
        if any(result.errors for result in record_results):
            return self._reject(Stage.DATA_INTEGRITY, record_results, original_token)

        records = [DataRecord.model_validate(record) for record in submission.data]
        logs = await self.fetcher.fetch_all([record.tx for record in records])

        on_chain_errors = validate_on_chain_properties(
            submission.subject,
            list(zip(records, logs)),
            self.address_comparison
        )
        if on_chain_errors:
            return self._reject(Stage.ON_CHAIN, on_chain_errors, original_token)

        self.logger.info(f"Share {_token_hint(original_token)} accepted ({len(records)} record(s))")
        return VerificationResult.accepted(original_token)
