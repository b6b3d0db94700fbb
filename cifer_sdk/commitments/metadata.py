# cifer_sdk/commitments/metadata.py
"""
CIFER SDK Commitments: Metadata Reads

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass

from ..abi import cifer_encrypted as abi
from ..adapters.base import ReadClient
from ..errors import CommitmentsError, CommitmentNotFoundError
from ..types import Address, Bytes32, CallRequest, CIFERMetadata


@dataclass
class CommitmentReadParams:
    chain_id: int
    contract_address: Address
    read_client: ReadClient


async def get_cifer_metadata(params: CommitmentReadParams, data_id: Bytes32) -> CIFERMetadata:
    """
    Read the stored fingerprint for data_id.

    Raises:
        CommitmentNotFoundError: If nothing was stored (storedAtBlock == 0)
        CommitmentsError: On call or decode failure
    """
    try:
        raw = await params.read_client.call(
            params.chain_id,
            CallRequest(to=params.contract_address, data=abi.encode_get_cifer_metadata(data_id)),
        )
        metadata = abi.decode_get_cifer_metadata(raw)
    except Exception as e:
        raise CommitmentsError(f"Failed to get CIFER metadata: {e}", e) from e

    if metadata.stored_at_block == 0:
        raise CommitmentNotFoundError(data_id)
    return metadata


async def cifer_data_exists(params: CommitmentReadParams, data_id: Bytes32) -> bool:
    try:
        raw = await params.read_client.call(
            params.chain_id,
            CallRequest(to=params.contract_address, data=abi.encode_cifer_data_exists(data_id)),
        )
        return abi.decode_cifer_data_exists(raw)
    except Exception as e:
        raise CommitmentsError(f"Failed to check data existence: {e}", e) from e
