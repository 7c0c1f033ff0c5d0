"""
Decoding of receipt logs against a fixed contract ABI.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from eth_abi.exceptions import DecodingError
from eth_utils import event_abi_to_log_topic
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import MismatchedABI

from ..exceptions import LogDecodeError
from ..models import DecodedLog, DecodedLogEvent

logger = logging.getLogger(__name__)

def _stringify(value: Any) -> str:
    """Render a decoded ABI value as a string"""
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(bytes(value))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class LogDecoder:
    """
    Decodes raw receipt logs into DecodedLog entries.

    The decoder is built once from an immutable ABI and shared by every
    request. Logs whose first topic matches no event of the ABI are omitted.
    """

    def __init__(self, abi: Sequence[Mapping[str, Any]]):
        self.abi = tuple(abi)
        # No provider is needed; the contract object is only used for decoding
        self._contract = Web3().eth.contract(abi=[dict(entry) for entry in self.abi])
        self._events_by_topic: Dict[bytes, Mapping[str, Any]] = {
            event_abi_to_log_topic(dict(entry)): entry
            for entry in self.abi
            if entry.get("type") == "event" and not entry.get("anonymous", False)
        }

    def decode_log(self, log: Mapping[str, Any]) -> List[DecodedLog]:
        """
        Decode a single raw log.

        Returns:
            A one-element list with the decoded log, or an empty list when the
            log belongs to no known event

        Raises:
            LogDecodeError: If the log matches a known event but its payload
                cannot be decoded
        """
        topics = log.get("topics") or []
        if not topics:
            return []
        topics = [HexBytes(topic) for topic in topics]
        event_abi = self._events_by_topic.get(bytes(topics[0]))
        if event_abi is None:
            return []

        name = event_abi["name"]
        try:
            processed = getattr(self._contract.events, name)().process_log(dict(log, topics=topics))
        except MismatchedABI as e:
            logger.debug(f"Skipping log that does not match {name}: {e}")
            return []
        except (DecodingError, ValueError, KeyError, TypeError) as e:
            raise LogDecodeError(f"Failed to decode {name} log: {e}") from e

        events = [
            DecodedLogEvent(
                name=param["name"],
                type=param["type"],
                value=_stringify(processed["args"][param["name"]])
            )
            for param in event_abi["inputs"]
        ]
        return [DecodedLog(address=str(log.get("address", "")), name=name, events=events)]

    def decode_logs(self, logs: Iterable[Mapping[str, Any]]) -> List[DecodedLog]:
        """Decode every known log of a receipt, keeping receipt order"""
        decoded: List[DecodedLog] = []
        for log in logs:
            decoded.extend(self.decode_log(log))
        return decoded
