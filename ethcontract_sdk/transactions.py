"""
Transaction request construction.

Pure functions of their inputs; gas estimates are obtained by the caller.
"""
from typing import Any, Optional, Sequence

from .abi import ContractABI
from .constants import CODE_PREFIX_LENGTH
from .models import TransactionRequest


def strip_code_prefix(code: str) -> str:
    """Drop the fixed-length "0x" prefix from compiled bytecode."""
    return code[CODE_PREFIX_LENGTH:]


def build_creation_tx(
    code: str,
    sender: str,
    gas: Optional[int] = None,
    gas_price: Optional[int] = None,
) -> TransactionRequest:
    """
    Build a contract creation request.

    Args:
        code: Bytecode with its prefix already stripped
        sender: Account deploying the contract
        gas: Gas limit (omitted for estimation)
        gas_price: Gas price in wei (omitted for estimation)
    """
    return TransactionRequest(from_address=sender, data=code, gas=gas, gas_price=gas_price)


def build_method_call_tx(
    abi: ContractABI,
    method: str,
    args: Sequence[Any],
    sender: str,
    contract_address: str,
    gas: Optional[int] = None,
    gas_price: Optional[int] = None,
) -> TransactionRequest:
    """
    Build a request calling `method` on a deployed contract.

    Raises:
        NoSuchContractMethodError: If the ABI has no such method
    """
    data = abi.encode_call(method, args)
    return TransactionRequest(
        from_address=sender,
        to=contract_address,
        data=data,
        gas=gas,
        gas_price=gas_price,
    )
