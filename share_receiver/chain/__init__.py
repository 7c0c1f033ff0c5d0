"""
On-chain access for the share receiver: the attestation contract ABI, the
receipt log decoder and the concurrent receipt fetcher.
"""
from .abi import ATTESTATION_LOGIC_ABI, TRAIT_ATTESTED
from .decoder import LogDecoder
from .fetcher import OnChainLogFetcher

__all__ = ['ATTESTATION_LOGIC_ABI', 'TRAIT_ATTESTED', 'LogDecoder', 'OnChainLogFetcher']
