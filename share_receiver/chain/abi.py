"""
Event ABI of the AttestationLogic contract.

Only events are listed; the receiver never calls contract functions.
"""
from typing import Any, Dict, Tuple

TRAIT_ATTESTED = "TraitAttested"

ATTESTATION_LOGIC_ABI: Tuple[Dict[str, Any], ...] = (
    {
        "anonymous": False,
        "inputs": [
            {"indexed": False, "internalType": "address", "name": "subject", "type": "address"},
            {"indexed": False, "internalType": "address", "name": "attester", "type": "address"},
            {"indexed": False, "internalType": "address", "name": "requester", "type": "address"},
            {"indexed": False, "internalType": "bytes32", "name": "dataHash", "type": "bytes32"}
        ],
        "name": TRAIT_ATTESTED,
        "type": "event"
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "attester", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "requester", "type": "address"}
        ],
        "name": "AttestationRejected",
        "type": "event"
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": False, "internalType": "bytes32", "name": "link", "type": "bytes32"},
            {"indexed": False, "internalType": "address", "name": "attester", "type": "address"}
        ],
        "name": "AttestationRevoked",
        "type": "event"
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": False, "internalType": "address", "name": "oldTokenEscrowMarketplace", "type": "address"},
            {"indexed": False, "internalType": "address", "name": "newTokenEscrowMarketplace", "type": "address"}
        ],
        "name": "TokenEscrowMarketplaceChanged",
        "type": "event"
    },
)
