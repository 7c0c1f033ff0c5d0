"""
Concurrent retrieval of decoded receipt logs.
"""
import asyncio
import logging
from typing import Any, List, Mapping, Optional, Sequence

import aiohttp
from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.exceptions import TransactionNotFound, Web3Exception

from .._rate_limited_log import rate_limited_log
from ..exceptions import ReceiptFetchError
from ..models import DecodedLog
from .decoder import LogDecoder

logger = logging.getLogger(__name__)


class OnChainLogFetcher:
    """
    Fetches transaction receipts from an RPC node and decodes their logs.

    Every referenced transaction is fetched concurrently. Results are joined
    in the order the transactions were given, never in completion order. A
    single failed fetch fails the whole batch; there are no retries.
    """

    def __init__(
        self,
        provider_url: str,
        decoder: LogDecoder,
        timeout: float = 30,
        w3: Optional[AsyncWeb3] = None
    ):
        """
        Initialize the fetcher

        Args:
            provider_url: Blockchain RPC endpoint URL
            decoder: Decoder built from the attestation contract ABI
            timeout: Timeout for each RPC request in seconds
            w3: Optional pre-built AsyncWeb3 instance
        """
        self.provider_url = provider_url
        self.decoder = decoder
        self.timeout = timeout
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(
            provider_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)}
        ))

    async def get_receipt(self, tx: str) -> Mapping[str, Any]:
        """
        Fetch the receipt of a transaction.

        Raises:
            ReceiptFetchError: If the transaction is unknown or the node fails
        """
        try:
            receipt = await self.w3.eth.get_transaction_receipt(tx)
        except TransactionNotFound as e:
            raise ReceiptFetchError(f"Transaction receipt not found: {tx}", tx=tx) from e
        except (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            rate_limited_log(
                f"RPC request to {self.provider_url} failed: {type(e).__name__}",
                level="warning",
                logger_instance=logger
            )
            raise ReceiptFetchError(f"Failed to fetch receipt for {tx}: {e}", tx=tx) from e

        if receipt is None:
            raise ReceiptFetchError(f"Transaction receipt not found: {tx}", tx=tx)
        return receipt

    async def fetch_logs(self, tx: str) -> List[DecodedLog]:
        """Fetch one receipt and decode its logs"""
        receipt = await self.get_receipt(tx)
        logs = receipt.get("logs")
        if logs is None:
            raise ReceiptFetchError(f"Receipt for {tx} carries no logs field", tx=tx)
        decoded = self.decoder.decode_logs(logs)
        logger.debug(f"Decoded {len(decoded)} of {len(logs)} log(s) for {tx}")
        return decoded

    async def fetch_all(self, tx_ids: Sequence[str]) -> List[List[DecodedLog]]:
        """
        Fetch and decode the logs of every transaction concurrently.

        Args:
            tx_ids: Transaction hashes, one per data record

        Returns:
            Decoded logs, index-aligned with ``tx_ids``

        Raises:
            InfrastructureError: If any fetch fails; outstanding fetches are
                cancelled
        """
        tasks = [asyncio.ensure_future(self.fetch_logs(tx)) for tx in tx_ids]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            raise

    async def close(self) -> None:
        """Close the provider's HTTP sessions on the running event loop"""
        await self.w3.provider.disconnect()
