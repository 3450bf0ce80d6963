"""
Contract compilation through the node, with an optional source cache.
"""
import hashlib
import logging
import threading
from typing import Dict, Optional

from cachetools import LRUCache

from .constants import DEFAULT_COMPILE_CACHE_SIZE
from .exceptions import CompilationError
from .models import CompiledContract
from .node import NodeClient

logger = logging.getLogger(__name__)


def _detached(compiled: Dict[str, CompiledContract]) -> Dict[str, CompiledContract]:
    return {name: contract.model_copy(deep=True) for name, contract in compiled.items()}


class ContractCompiler:
    """
    Compiles contract source via the node.

    Compilation is pure, so output is cached by the SHA-256 of the source
    text. A cache size of 0 recompiles on every call.
    """

    def __init__(self, node: NodeClient, cache_size: int = DEFAULT_COMPILE_CACHE_SIZE):
        self.node = node
        self._cache: Optional[LRUCache] = LRUCache(maxsize=cache_size) if cache_size > 0 else None
        self._lock = threading.RLock()

    @staticmethod
    def source_digest(source: str) -> str:
        return hashlib.sha256(source.encode("utf-8")).hexdigest()

    def compile(self, source: str) -> Dict[str, CompiledContract]:
        """
        Compile source text into contracts keyed by name.

        Raises:
            CompilationError: If the node rejects the source
            NodeError: If the node cannot be reached
        """
        if self._cache is None:
            return self.node.compile_source(source)

        digest = self.source_digest(source)
        with self._lock:
            cached = self._cache.get(digest)
        if cached is not None:
            logger.debug(f"Compile cache hit for {digest[:12]}")
            return _detached(cached)

        compiled = self.node.compile_source(source)
        with self._lock:
            self._cache[digest] = _detached(compiled)
        return compiled

    @staticmethod
    def lookup(compiled: Dict[str, CompiledContract], contract_key: str) -> CompiledContract:
        """
        Pick one contract out of compiler output.

        Raises:
            CompilationError: If the key is absent
        """
        contract = compiled.get(contract_key)
        if contract is None:
            raise CompilationError(contract_key)
        return contract

    def compile_contract(self, source: str, contract_key: str) -> CompiledContract:
        """Compile `source` and return the contract named `contract_key`."""
        compiled = self.compile(source)
        logger.debug(f"Compiled contracts: {sorted(compiled)}")
        return self.lookup(compiled, contract_key)

    def clear(self) -> None:
        if self._cache is not None:
            with self._lock:
                self._cache.clear()
