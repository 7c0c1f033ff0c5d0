"""
Tests for the command line interface.
"""
import json

import pytest
from unittest.mock import patch
from typer.testing import CliRunner
from web3.exceptions import TransactionNotFound

from share_receiver.chain import OnChainLogFetcher
from share_receiver.cli import app
from tests.test_helpers import TEST_RPC_URL, FakeWeb3, receipt_for

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("share_receiver.cli.logging.basicConfig"):
        yield


@pytest.fixture
def submission_file(tmp_path, submission):
    path = tmp_path / "share.json"
    path.write_text(json.dumps(submission))
    return path


def _patch_web3(fake):
    """Make every fetcher built by the CLI use ``fake``"""
    original = OnChainLogFetcher.__init__

    def _init(self, provider_url, decoder, timeout=30, w3=None):
        original(self, provider_url, decoder, timeout=timeout, w3=fake)

    return patch.object(OnChainLogFetcher, "__init__", _init)


def test_verify_accepted(submission_file, submission, matching_web3):
    with _patch_web3(matching_web3):
        result = runner.invoke(app, ["verify", str(submission_file), "--provider", TEST_RPC_URL])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"success": True, "token": submission["token"]}
    assert matching_web3.provider.disconnected


def test_verify_rejected(tmp_path, submission):
    record = submission["data"][0]
    fake = FakeWeb3({record["tx"]: receipt_for(submission, record, attester="0x9999999999999999999999999999999999999999")})
    path = tmp_path / "share.json"
    path.write_text(json.dumps(submission))

    with _patch_web3(fake):
        result = runner.invoke(app, ["verify", str(path), "--provider", TEST_RPC_URL])

    assert result.exit_code == 1
    assert "attester" in result.stdout
    assert "on_chain" in result.output


def test_verify_infrastructure_failure(submission_file, submission):
    fake = FakeWeb3({submission["data"][0]["tx"]: TransactionNotFound("unknown")})

    with _patch_web3(fake):
        result = runner.invoke(app, ["verify", str(submission_file), "--provider", TEST_RPC_URL])

    assert result.exit_code == 2
    assert "not found" in result.output
    assert fake.provider.disconnected


def test_verify_unreadable_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{broken")
    result = runner.invoke(app, ["verify", str(path), "--provider", TEST_RPC_URL])
    assert result.exit_code == 2


def test_verify_provider_from_environment(submission_file, matching_web3, monkeypatch):
    monkeypatch.setenv("WEB3_PROVIDER", TEST_RPC_URL)
    with _patch_web3(matching_web3):
        result = runner.invoke(app, ["verify", str(submission_file)])
    assert result.exit_code == 0


def test_serve_without_configuration(monkeypatch):
    for name in ("PORT", "WEB3_PROVIDER"):
        monkeypatch.setenv(name, "")
    with patch("share_receiver.cli.uvicorn.run") as mock_run:
        result = runner.invoke(app, ["serve"])
    assert result.exit_code == 2
    mock_run.assert_not_called()


def test_serve_starts_uvicorn(monkeypatch):
    monkeypatch.setenv("PORT", "8181")
    monkeypatch.setenv("WEB3_PROVIDER", TEST_RPC_URL)
    with patch("share_receiver.cli.uvicorn.run") as mock_run:
        result = runner.invoke(app, ["serve"])

    assert result.exit_code == 0
    mock_run.assert_called_once()
    assert mock_run.call_args.kwargs["port"] == 8181
    assert mock_run.call_args.kwargs["host"] == "0.0.0.0"
