# cifer_sdk/commitments/tx_builders.py
"""
CIFER SDK Commitments: Store Transactions

Builds the TxIntent for an application contract's store function. The
contract is expected to emit CIFERDataStored and record the fingerprint.

Usage:
    intent = build_store_commitment_tx(
        chain_id=752025,
        contract_address=app_contract,
        store_function=COMMON_STORE_FUNCTIONS["storeWithKey"],
        args=StoreCommitmentArgs(key=key, secret_id=42,
                                 encrypted_message=msg, cifer=cifer),
    )

Updated: 2025-01-20
Version: 0.1.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from ..abi.cifer_encrypted import encode_store
from ..common import byte_length
from ..errors import CommitmentsError
from ..types import Address, Bytes32, Hex, TxIntentWithMeta
from .integrity import validate_for_storage


@dataclass
class StoreFunction:
    """Store function shape: name plus ordered (arg name, solidity type) inputs."""
    name: str
    inputs: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(t for _, t in self.inputs)})"


@dataclass
class StoreCommitmentArgs:
    key: Bytes32
    secret_id: int
    encrypted_message: Hex
    cifer: Hex


COMMON_STORE_FUNCTIONS: Dict[str, StoreFunction] = {
    "storeWithKey": StoreFunction(
        name="store",
        inputs=[("key", "bytes32"), ("encryptedMessage", "bytes"), ("cifer", "bytes")],
    ),
    "storeWithSecretId": StoreFunction(
        name="store",
        inputs=[
            ("key", "bytes32"),
            ("secretId", "uint256"),
            ("encryptedMessage", "bytes"),
            ("cifer", "bytes"),
        ],
    ),
}

_SUPPORTED_TYPES = ("bytes32", "bytes", "uint256", "address")


def _argument_map(args: StoreCommitmentArgs) -> Dict[str, Any]:
    values = {
        "key": args.key,
        "secretId": args.secret_id,
        "encryptedMessage": args.encrypted_message,
        "cifer": args.cifer,
    }
    aliases = {f"_{name}": value for name, value in values.items()}
    # Common names contracts use for the ciphertext argument
    for name in ("data", "message", "payload"):
        aliases[name] = args.encrypted_message
    values.update(aliases)
    return values


def encode_store_call(store_function: StoreFunction, args: StoreCommitmentArgs) -> Hex:
    """
    Encode calldata by matching input names to commitment fields.

    Raises:
        CommitmentsError: Unknown argument name or unsupported type
    """
    arg_map = _argument_map(args)
    values = []
    for name, solidity_type in store_function.inputs:
        if name not in arg_map:
            raise CommitmentsError(f"Missing argument '{name}' for function {store_function.name}")
        if solidity_type not in _SUPPORTED_TYPES:
            raise CommitmentsError(f"Unsupported argument type '{solidity_type}' for encoding")
        values.append(arg_map[name])
    return encode_store(store_function.signature, values)


def build_store_commitment_tx(
    *,
    chain_id: int,
    contract_address: Address,
    store_function: StoreFunction,
    args: StoreCommitmentArgs,
    validate: bool = True,
) -> TxIntentWithMeta:
    """
    Build a store transaction for an encrypted commitment.

    Raises:
        InvalidCiferSizeError, PayloadTooLargeError, CommitmentsError:
            when validate is set and the sizes are not storable
    """
    if validate:
        validate_for_storage(args.cifer, args.encrypted_message)

    return TxIntentWithMeta(
        chain_id=chain_id,
        to=contract_address,
        data=encode_store_call(store_function, args),
        description=f"Store encrypted commitment with key {args.key[:10]}...",
        function_name=store_function.name,
        args={
            "key": args.key,
            "secretId": str(args.secret_id),
            "encryptedMessageLength": byte_length(args.encrypted_message),
            "ciferLength": byte_length(args.cifer),
        },
    )
