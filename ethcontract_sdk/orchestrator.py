"""
ContractOrchestrator - create, modify and run smart contracts on a node.

Every state-changing path follows the same order: compile, estimate gas,
check it against the caller's allowance, submit, then wait for the receipt
asynchronously. Nothing is submitted before the gas check passes.
"""
import logging
from typing import Dict, Optional

from .abi import ContractABI, DecodedValue
from .compiler import ContractCompiler
from .config import OrchestratorConfig
from .constants import DEFAULT_CALL_GAS_LIMIT, DEFAULT_COMPILE_CACHE_SIZE, DEFAULT_POLL_INTERVAL, DEFAULT_RECEIPT_TIMEOUT
from .exceptions import ContractError, NoSuchContractMethodError
from .gas import check_gas, decode_quantity
from .models import CompiledContract, ContractDescriptor, MethodType, ReceiptType
from .node import NodeClient, Signer, Web3NodeClient
from .receipts import ReceiptFuture, ReceiptWaiter
from .transactions import build_creation_tx, build_method_call_tx, strip_code_prefix


class ContractOrchestrator:
    """
    Facade over compilation, gas policy, submission and receipt waiting.

    Example:
        >>> orchestrator = ContractOrchestrator.from_config(OrchestratorConfig.from_env())
        >>> futures = orchestrator.create(descriptor, account_gas=3_000_000)
        >>> receipt = futures[ReceiptType.CREATE].result(timeout=5)
    """

    def __init__(
        self,
        node: NodeClient,
        gas_price: int,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        call_gas_limit: int = DEFAULT_CALL_GAS_LIMIT,
        compile_cache_size: int = DEFAULT_COMPILE_CACHE_SIZE,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            node: Node client
            gas_price: Gas price in wei attached to every transaction
            poll_interval: Seconds between receipt polls
            receipt_timeout: Seconds before a receipt wait gives up
            call_gas_limit: Gas limit for read-only calls
            compile_cache_size: Compiled sources kept in memory (0 disables)
            logger: Optional logger instance
        """
        self.node = node
        self.gas_price = gas_price
        self.call_gas_limit = call_gas_limit
        self.logger = logger or logging.getLogger(__name__)
        self.compiler = ContractCompiler(node, cache_size=compile_cache_size)
        self.waiter = ReceiptWaiter(node, poll_interval=poll_interval, timeout=receipt_timeout, logger=self.logger)

    @classmethod
    def from_config(
        cls,
        config: OrchestratorConfig,
        signer: Optional[Signer] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "ContractOrchestrator":
        """Build an orchestrator talking to `config.rpc_url` through web3."""
        node = Web3NodeClient(
            config.rpc_url,
            signer=signer,
            retry_count=config.retry_count,
            timeout=config.timeout,
            logger=logger,
        )
        return cls(
            node,
            gas_price=config.gas_price,
            poll_interval=config.poll_interval,
            receipt_timeout=config.receipt_timeout,
            call_gas_limit=config.call_gas_limit,
            compile_cache_size=config.compile_cache_size,
            logger=logger,
        )

    def create(self, descriptor: ContractDescriptor, account_gas: int) -> Dict[ReceiptType, ReceiptFuture]:
        """
        Deploy a contract.

        Args:
            descriptor: Contract to deploy
            account_gas: Gas the account authorizes

        Returns:
            {ReceiptType.CREATE: future receipt}

        Raises:
            GasExceededError: If the estimate exceeds account_gas (nothing is submitted)
            CompilationError: If the contract key is missing from compiler output
            NodeError: If a node call fails
        """
        descriptor.add_methods()
        contract = self._compile(descriptor)
        code = strip_code_prefix(contract.code)
        sender = descriptor.account_address

        gas = decode_quantity(self.node.estimate_gas(build_creation_tx(code, sender)))
        self.logger.debug(f"Estimated creation gas for {descriptor.contract_key}: {gas}")
        check_gas(sender, account_gas, gas)

        tx_hash = self.node.send_transaction(build_creation_tx(code, sender, gas=gas, gas_price=self.gas_price))
        receipts: Dict[ReceiptType, ReceiptFuture] = {}
        receipts[ReceiptType.CREATE] = self.waiter.start(tx_hash, None, ReceiptType.CREATE)
        return receipts

    def modify(self, contract_address: str, descriptor: ContractDescriptor, account_gas: int) -> ReceiptFuture:
        """
        Call a state-changing method on a deployed contract.

        Raises:
            NoSuchContractMethodError: If the MODIFY method is not attached or not in the ABI
            GasExceededError: If the estimate exceeds account_gas (nothing is submitted)
            CompilationError: If the contract key is missing from compiler output
            NodeError: If a node call fails
        """
        descriptor.add_methods()
        method = descriptor.get_method(MethodType.MODIFY)
        abi = self._contract_abi(descriptor)
        sender = descriptor.account_address

        tx = build_method_call_tx(
            abi, self._method_name(method.name, MethodType.MODIFY), method.args,
            sender, contract_address, gas_price=self.gas_price,
        )
        gas = decode_quantity(self.node.estimate_gas(tx))
        self.logger.debug(f"Estimated gas for {method.name} on {contract_address}: {gas}")
        check_gas(sender, account_gas, gas)

        tx_hash = self.node.send_transaction(tx.with_gas(gas))
        return self.waiter.start(tx_hash, contract_address, ReceiptType.MODIFY)

    def run(self, contract_address: str, descriptor: ContractDescriptor) -> DecodedValue:
        """
        Call a read-only method and return its first output.

        No gas check and no receipt wait; the call returns synchronously.

        Raises:
            NoSuchContractMethodError: If the RUN method is not attached or not in the ABI
            CompilationError: If the contract key is missing from compiler output
            ContractError: If the method returns nothing
            NodeError: If a node call fails
        """
        descriptor.add_methods()
        method = descriptor.get_method(MethodType.RUN)
        abi = self._contract_abi(descriptor)
        name = self._method_name(method.name, MethodType.RUN)

        tx = build_method_call_tx(abi, name, method.args, descriptor.account_address, contract_address)
        result = self.node.call(tx.with_gas(self.call_gas_limit))
        outputs = abi.decode_output(name, result)
        if not outputs:
            raise ContractError(f"{name} returned no value")
        return outputs[0]

    def wait_for_receipt(
        self,
        tx_hash: str,
        receipt_type: ReceiptType,
        contract_address: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ReceiptFuture:
        """Start a new wait on an already submitted transaction, e.g. after a timeout."""
        return self.waiter.start(tx_hash, contract_address, receipt_type, timeout=timeout)

    def _compile(self, descriptor: ContractDescriptor) -> CompiledContract:
        return self.compiler.compile_contract(descriptor.source_text(), descriptor.contract_key)

    def _contract_abi(self, descriptor: ContractDescriptor) -> ContractABI:
        return ContractABI(self._compile(descriptor).abi)

    @staticmethod
    def _method_name(name: Optional[str], method_type: MethodType) -> str:
        if not name:
            raise NoSuchContractMethodError(None, method_type.value)
        return name
