"""
ethcontract SDK - deploy, modify and query smart contracts through a node.
"""
from .abi import ContractABI, DecodedValue, ScalarKind
from .compiler import ContractCompiler
from .config import OrchestratorConfig
from .exceptions import (
    CompilationError,
    ContractError,
    GasExceededError,
    NoSuchContractMethodError,
    NodeError,
)
from .gas import check_gas, decode_quantity
from .models import (
    CompiledContract,
    ContractDescriptor,
    Method,
    MethodType,
    Receipt,
    ReceiptType,
    StaticContractDescriptor,
    TransactionRequest,
)
from .node import NodeClient, Signer, Web3NodeClient
from .orchestrator import ContractOrchestrator
from .receipts import ReceiptFuture, ReceiptWaiter, WaiterState
from .version import __version__

__all__ = [
    "ContractOrchestrator",
    "OrchestratorConfig",
    "ContractCompiler",
    "ReceiptWaiter",
    "ReceiptFuture",
    "WaiterState",
    "NodeClient",
    "Web3NodeClient",
    "Signer",
    "ContractABI",
    "DecodedValue",
    "ScalarKind",
    "ContractDescriptor",
    "StaticContractDescriptor",
    "Method",
    "MethodType",
    "CompiledContract",
    "TransactionRequest",
    "Receipt",
    "ReceiptType",
    "check_gas",
    "decode_quantity",
    "ContractError",
    "GasExceededError",
    "NoSuchContractMethodError",
    "CompilationError",
    "NodeError",
    "__version__",
]
