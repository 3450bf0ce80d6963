"""
Exceptions for the ethcontract SDK.
"""
from typing import Optional


class ContractError(Exception):
    """Base exception for contract orchestration errors."""
    http_status = 500


class GasExceededError(ContractError):
    """Raised when the estimated gas exceeds the account's allowance."""
    http_status = 400

    def __init__(self, account_address: str, allowance: int, estimated_gas: int):
        self.account_address = account_address
        self.allowance = allowance
        self.estimated_gas = estimated_gas
        super().__init__(f"gas exceeded for account {account_address}")


class NoSuchContractMethodError(ContractError):
    """Raised when a method is missing from the descriptor or the compiled ABI."""
    http_status = 404

    def __init__(self, method_name: Optional[str], method_type: Optional[str] = None):
        self.method_name = method_name
        self.method_type = method_type
        if method_name is None:
            message = f"no {method_type} method attached to contract descriptor"
        else:
            message = f"no such contract method: {method_name}"
        super().__init__(message)


class CompilationError(ContractError):
    """Raised when the source does not compile or the contract key is absent."""

    def __init__(self, contract_key: Optional[str], message: Optional[str] = None):
        self.contract_key = contract_key
        super().__init__(message or f"contract {contract_key} not found in compiler output")


class NodeError(ContractError):
    """Raised when a node RPC call fails."""
    http_status = 502
