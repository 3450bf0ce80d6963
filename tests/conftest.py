"""
Pytest fixtures for the ethcontract SDK tests.
"""
from unittest.mock import MagicMock

import pytest

from ethcontract_sdk.models import CompiledContract, Method, MethodType, Receipt, StaticContractDescriptor
from ethcontract_sdk.orchestrator import ContractOrchestrator

# Constants for testing
TEST_RPC_URL = "https://rpc.example.com"
TEST_ACCOUNT = "0x1234567890123456789012345678901234567890"
TEST_CONTRACT = "0x0987654321098765432109876543210987654321"
TEST_CONTRACT_KEY = "SimpleStorage"
TEST_GAS_PRICE = 20_000_000_000
TEST_TX_HASH = "0xabc"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_SOURCE = "contract SimpleStorage { uint value; function set(uint v) { value = v; } function get() constant returns (uint) { return value; } }"

SIMPLE_STORAGE_ABI = [
    {
        "inputs": [{"name": "v", "type": "uint256"}],
        "name": "set",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "get",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "greeting",
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function",
    },
]


@pytest.fixture
def compiled_contract():
    return CompiledContract(code="0x6060604052", abi=SIMPLE_STORAGE_ABI)


@pytest.fixture
def mined_receipt():
    return Receipt.model_validate({
        "transactionHash": TEST_TX_HASH,
        "blockNumber": "0x10",
        "blockHash": "0x" + "11" * 32,
        "gasUsed": "0x5208",
        "status": "0x1",
        "contractAddress": None,
        "logs": [],
    })


@pytest.fixture
def mock_node(compiled_contract, mined_receipt):
    """Node stub: compiles SimpleStorage, estimates 21000 gas, mines on first poll."""
    node = MagicMock()
    node.compile_source.return_value = {TEST_CONTRACT_KEY: compiled_contract}
    node.estimate_gas.return_value = "0x5208"
    node.send_transaction.return_value = TEST_TX_HASH
    node.get_transaction_receipt.return_value = mined_receipt
    return node


@pytest.fixture
def descriptor():
    return StaticContractDescriptor(
        TEST_CONTRACT_KEY,
        TEST_ACCOUNT,
        TEST_SOURCE,
        methods=[
            Method(type=MethodType.MODIFY, name="set", args=[42]),
            Method(type=MethodType.RUN, name="get"),
        ],
    )


@pytest.fixture
def orchestrator(mock_node):
    return ContractOrchestrator(
        mock_node,
        gas_price=TEST_GAS_PRICE,
        poll_interval=0.01,
        receipt_timeout=1.0,
        compile_cache_size=0,
    )
