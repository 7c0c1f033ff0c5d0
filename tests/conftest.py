"""
Pytest fixtures for the share receiver tests.
"""
import pytest
from eth_account import Account
from web3 import AsyncHTTPProvider

from share_receiver._rate_limited_log import reset_rate_limits
from share_receiver.chain import ATTESTATION_LOGIC_ABI, LogDecoder, OnChainLogFetcher
from share_receiver.pipeline import VerificationPipeline

from tests.test_helpers import (
    TEST_PRIV_KEY, TEST_RPC_URL, FakeWeb3, build_record, build_submission, receipt_for
)


@pytest.fixture(autouse=True)
def _block_rpc(monkeypatch):
    """
    Fail loudly if any test reaches a real RPC node.
    Works for all tests because it is autouse.
    """
    async def _no_network(self, method, params):
        raise AssertionError(f"Unexpected RPC request: {method}")

    monkeypatch.setattr(AsyncHTTPProvider, "make_request", _no_network, raising=True)


@pytest.fixture(autouse=True)
def _fresh_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def test_account():
    """Create a deterministic test account"""
    return Account.from_key(TEST_PRIV_KEY)


@pytest.fixture(scope="session")
def decoder():
    return LogDecoder(ATTESTATION_LOGIC_ABI)


@pytest.fixture
def submission():
    """A valid signed submission with a single data record"""
    return build_submission([build_record(0)])


@pytest.fixture
def matching_web3(submission):
    """Fake node whose receipts match every record of ``submission``"""
    return FakeWeb3({
        record["tx"]: receipt_for(submission, record) for record in submission["data"]
    })


@pytest.fixture
def make_pipeline(decoder):
    """Build a pipeline backed by the real decoder and a fake node"""
    def _make(fake_web3, **kwargs):
        fetcher = OnChainLogFetcher(TEST_RPC_URL, decoder, w3=fake_web3)
        return VerificationPipeline(fetcher, **kwargs)
    return _make
