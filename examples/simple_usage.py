#!/usr/bin/env python3
"""
Simple example of using the ethcontract SDK.
"""
import logging

from ethcontract_sdk import (
    ContractOrchestrator,
    GasExceededError,
    Method,
    MethodType,
    OrchestratorConfig,
    ReceiptType,
    StaticContractDescriptor,
)

logging.basicConfig(level=logging.INFO)

SOURCE = """
pragma solidity ^0.4.0;
contract SimpleStorage {
    uint storedData;
    function set(uint x) { storedData = x; }
    function get() constant returns (uint) { return storedData; }
}
"""


def main():
    """
    Demonstrate basic usage of the ContractOrchestrator.

    This example shows how to:
    1. Deploy a contract and wait for its receipt
    2. Call a state-changing method on it
    3. Read the stored value back
    """
    # Reads ETHCONTRACT_RPC_URL, ETHCONTRACT_GAS_PRICE and optional overrides
    config = OrchestratorConfig.from_env()
    orchestrator = ContractOrchestrator.from_config(config)

    account = input("Account address: ").strip()
    descriptor = StaticContractDescriptor(
        "SimpleStorage",
        account,
        SOURCE,
        methods=[
            Method(type=MethodType.MODIFY, name="set", args=[42]),
            Method(type=MethodType.RUN, name="get"),
        ],
    )

    future = None
    try:
        futures = orchestrator.create(descriptor, account_gas=3_000_000)
        future = futures[ReceiptType.CREATE]
        receipt = future.result(timeout=config.receipt_timeout + 1)
        print(f"Contract deployed at {receipt.contract_address} (tx {receipt.tx_hash})")

        future = orchestrator.modify(receipt.contract_address, descriptor, account_gas=100_000)
        modified = future.result(timeout=config.receipt_timeout + 1)
        print(f"set(42) mined in block {modified.block_number}")

        value = orchestrator.run(receipt.contract_address, descriptor)
        print(f"get() returned {value}")

    except GasExceededError as e:
        print(f"Not enough gas: {e}")
    except Exception as e:
        print(f"Error: {str(e)}")
        if future is not None and future.pending:
            print(f"Receipt still pending for {future.tx_hash}")


if __name__ == "__main__":
    main()
