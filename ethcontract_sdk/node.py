"""
Node client used by the contract orchestrator.

The orchestrator only depends on the NodeClient protocol; Web3NodeClient
implements it over JSON-RPC with web3.py.
"""
import logging
import os
import urllib.parse
from typing import Any, Dict, Optional, Protocol, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from web3 import Web3
from web3.exceptions import TransactionNotFound, Web3Exception

from .constants import DEFAULT_HTTP_TIMEOUT, DEFAULT_RETRY_COUNT
from .exceptions import CompilationError, NodeError
from .models import CompiledContract, Receipt, TransactionRequest

logger = logging.getLogger(__name__)


class Signer(Protocol):
    """Protocol for external transaction signers"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return signed tx object"""
        ...


class NodeClient(Protocol):
    """Synchronous operations the orchestrator needs from a node."""

    def compile_source(self, source: str) -> Dict[str, CompiledContract]:
        ...

    def estimate_gas(self, tx: TransactionRequest) -> Union[str, int]:
        ...

    def send_transaction(self, tx: TransactionRequest) -> str:
        ...

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        ...

    def call(self, tx: TransactionRequest) -> str:
        ...


def validate_rpc_url(rpc_url: str) -> None:
    """
    Require https unless the node is local.

    Raises:
        ValueError: If the URL is insecure and ETHCONTRACT_INSECURE_RPC is not "1"
    """
    parsed = urllib.parse.urlparse(rpc_url)
    host = parsed.hostname or ""
    is_local = host in ("localhost", "127.0.0.1", "::1")
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"rpc_url must be an http(s) URL (got: {rpc_url!r})")
    if parsed.scheme != "https" and not is_local and os.environ.get("ETHCONTRACT_INSECURE_RPC") != "1":
        raise ValueError(
            f"rpc_url must use https:// for security (got: {parsed.scheme}://). "
            "Set ETHCONTRACT_INSECURE_RPC=1 to allow HTTP for development."
        )


def _to_hex(value: Union[bytes, str]) -> str:
    if isinstance(value, str):
        return value if value.startswith("0x") else "0x" + value
    return "0x" + bytes(value).hex()


def _to_plain(value: Any) -> Any:
    """Convert web3 AttributeDicts and HexBytes into JSON-style values."""
    if isinstance(value, (bytes, bytearray)):
        return _to_hex(value)
    if isinstance(value, dict) or hasattr(value, "items"):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


class Web3NodeClient:
    """
    NodeClient over an Ethereum JSON-RPC endpoint.

    Transactions are signed by the node (eth_sendTransaction) unless a
    signer is supplied, in which case they are signed locally and sent raw.
    """

    def __init__(
        self,
        rpc_url: str,
        signer: Optional[Signer] = None,
        retry_count: int = DEFAULT_RETRY_COUNT,
        timeout: int = DEFAULT_HTTP_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the node client

        Args:
            rpc_url: Ethereum RPC endpoint URL
            signer: Optional signer; without one the node signs
            retry_count: Number of retries for HTTP requests
            timeout: Timeout for HTTP requests in seconds
            logger: Optional logger instance

        Raises:
            ValueError: If the URL is not https (unless it is local)
        """
        validate_rpc_url(rpc_url)
        self.rpc_url = rpc_url
        self.signer = signer
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        # Setup HTTP session with retries
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))

        self.w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}, session=self.session))

    def _tx_params(self, tx: TransactionRequest) -> Dict[str, Any]:
        params = tx.to_rpc()
        params["from"] = Web3.to_checksum_address(params["from"])
        if params.get("to"):
            params["to"] = Web3.to_checksum_address(params["to"])
        params["data"] = _to_hex(params["data"])
        return params

    def compile_source(self, source: str) -> Dict[str, CompiledContract]:
        """
        Compile Solidity source on the node.

        Returns:
            Compiled contracts keyed by contract name

        Raises:
            CompilationError: If the node rejects the source
            NodeError: If the node cannot be reached
        """
        try:
            response = self.w3.provider.make_request("eth_compileSolidity", [source])
        except (Web3Exception, requests.RequestException, ValueError) as e:
            self.logger.error(f"Compilation request failed: {e}")
            raise NodeError(f"Compilation request failed: {str(e)}") from e
        error = response.get("error")
        if error:
            reason = error.get("message", error) if isinstance(error, dict) else error
            self.logger.error(f"Compilation failed: {reason}")
            raise CompilationError(None, f"Compilation failed: {reason}")
        result = response.get("result")
        if not isinstance(result, dict):
            raise NodeError(f"Unexpected compiler output: {result!r}")
        return {name: CompiledContract.from_rpc(_to_plain(entry)) for name, entry in result.items()}

    def estimate_gas(self, tx: TransactionRequest) -> Union[str, int]:
        try:
            return self.w3.eth.estimate_gas(self._tx_params(tx))
        except (Web3Exception, requests.RequestException, ValueError) as e:
            self.logger.error(f"Gas estimation failed: {e}")
            raise NodeError(f"Gas estimation failed: {str(e)}") from e

    def send_transaction(self, tx: TransactionRequest) -> str:
        """
        Submit a transaction.

        Returns:
            0x-prefixed transaction hash

        Raises:
            NodeError: If signing or submission fails
        """
        params = self._tx_params(tx)
        try:
            if self.signer is None:
                tx_hash = self.w3.eth.send_transaction(params)
            else:
                params["nonce"] = self.w3.eth.get_transaction_count(params["from"])
                params["chainId"] = self.w3.eth.chain_id
                signed = self.signer.sign_transaction(params)
                raw = getattr(signed, "raw_transaction", None) or signed.rawTransaction
                tx_hash = self.w3.eth.send_raw_transaction(raw)
        except (Web3Exception, requests.RequestException, ValueError) as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise NodeError(f"Failed to send transaction: {str(e)}") from e
        tx_hash = _to_hex(tx_hash)
        self.logger.info(f"Transaction sent: {tx_hash}")
        return tx_hash

    def get_transaction_receipt(self, tx_hash: str) -> Optional[Receipt]:
        """
        Fetch a receipt, or None while the transaction is not mined.

        Raises:
            NodeError: If the node call fails
        """
        try:
            receipt = self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        except (Web3Exception, requests.RequestException, ValueError) as e:
            raise NodeError(f"Receipt lookup failed for {tx_hash}: {str(e)}") from e
        if receipt is None:
            return None
        return Receipt.model_validate(_to_plain(receipt))

    def call(self, tx: TransactionRequest) -> str:
        try:
            result = self.w3.eth.call(self._tx_params(tx), "latest")
        except (Web3Exception, requests.RequestException, ValueError) as e:
            self.logger.error(f"Read-only call failed: {e}")
            raise NodeError(f"Call failed: {str(e)}") from e
        return _to_hex(result)

    def close(self) -> None:
        self.session.close()
