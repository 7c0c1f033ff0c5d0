"""
Helpers shared by the test suite.
"""
from .share_factory import (
    TEST_RPC_URL,
    TEST_PRIV_KEY,
    TEST_OTHER_PRIV_KEY,
    TEST_CONTRACT,
    TEST_ATTESTER,
    TEST_REQUESTER,
    TEST_TOKEN,
    tx_hash,
    build_record,
    sign_hash,
    build_submission,
    raw_trait_attested_log,
    raw_unrelated_log,
    receipt_for,
    decoded_trait_attested,
    FakeWeb3,
    FakeLogFetcher,
)
