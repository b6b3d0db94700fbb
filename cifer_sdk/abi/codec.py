# cifer_sdk/abi/codec.py
"""
CIFER SDK ABI: Codec Primitives

Selector/topic derivation and calldata packing on eth_abi. Signatures are
canonical Solidity strings, e.g. "setDelegate(uint256,address)".

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from eth_abi import encode, decode
from web3 import Web3

from ..common import to_bytes


def signature_types(signature: str) -> List[str]:
    """Parameter types of a flat (non-tuple) canonical signature."""
    inner = signature[signature.index("(") + 1:signature.rindex(")")]
    return [t.strip() for t in inner.split(",")] if inner.strip() else []


def function_selector(signature: str) -> bytes:
    """First four bytes of keccak256(signature)."""
    return bytes(Web3.keccak(text=signature)[:4])


def event_topic(signature: str) -> str:
    """keccak256(signature) as a "0x" topic."""
    return Web3.to_hex(Web3.keccak(text=signature))


def encode_call(signature: str, args: Sequence[Any] = ()) -> str:
    """Selector + ABI-encoded args, as "0x" hex calldata."""
    types = signature_types(signature)
    if len(types) != len(args):
        raise ValueError(f"{signature} takes {len(types)} arguments, got {len(args)}")
    return Web3.to_hex(function_selector(signature) + encode(types, list(args)))


def decode_values(types: Sequence[str], data: Any) -> Tuple[Any, ...]:
    """ABI-decode hex or bytes into a tuple of Python values."""
    return tuple(decode(list(types), to_bytes(data)))


def topic_to_int(topic: str) -> int:
    return int(topic, 16)


def topic_to_address(topic: str) -> str:
    """Indexed address topic (32 bytes, left padded) to checksum address."""
    return Web3.to_checksum_address("0x" + topic[-40:])
