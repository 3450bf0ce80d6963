"""
Data models for the ethcontract SDK.
"""
from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import NoSuchContractMethodError
from .gas import decode_quantity


class MethodType(str, Enum):
    """Role a method plays in an operation."""
    CREATE = "CREATE"
    MODIFY = "MODIFY"
    RUN = "RUN"


class ReceiptType(str, Enum):
    """Kind of transaction a receipt confirms."""
    CREATE = "CREATE"
    MODIFY = "MODIFY"


class Method(BaseModel):
    """A contract method paired with its positional arguments."""
    model_config = ConfigDict(frozen=True)

    type: MethodType
    name: Optional[str] = None
    args: List[Any] = Field(default_factory=list)


class ContractDescriptor(ABC):
    """
    Identifies a contract and the methods an operation needs.

    Subclasses provide the method set through build_methods(); it is
    computed once by add_methods() and read-only afterwards.
    """

    def __init__(self, contract_key: str, account_address: str, content: str):
        self.contract_key = contract_key
        self.account_address = account_address
        self.content = content
        self._methods: Mapping[MethodType, Method] = MappingProxyType({})

    @abstractmethod
    def build_methods(self) -> Iterable[Method]:
        """Return the methods this descriptor carries."""

    @property
    def methods(self) -> Mapping[MethodType, Method]:
        return self._methods

    def add_methods(self) -> None:
        """Attach method metadata unless it is already present."""
        if self._methods:
            return
        self._methods = MappingProxyType({method.type: method for method in self.build_methods()})

    def get_method(self, method_type: MethodType) -> Method:
        """
        Look up the attached method of the given type.

        Raises:
            NoSuchContractMethodError: If no method of that type is attached
        """
        method = self._methods.get(method_type)
        if method is None:
            raise NoSuchContractMethodError(None, method_type.value)
        return method

    def source_text(self) -> str:
        """Compilable source for this contract."""
        return self.content

    def __repr__(self) -> str:
        return f"{type(self).__name__}(contract_key={self.contract_key!r}, account_address={self.account_address!r})"


class StaticContractDescriptor(ContractDescriptor):
    """Descriptor whose methods are given up front."""

    def __init__(self, contract_key: str, account_address: str, content: str, methods: Iterable[Method] = ()):
        super().__init__(contract_key, account_address, content)
        self._declared = tuple(methods)

    def build_methods(self) -> Iterable[Method]:
        return self._declared


class CompiledContract(BaseModel):
    """Bytecode and ABI for one compiled contract."""
    model_config = ConfigDict(frozen=True)

    code: str
    abi: List[Dict[str, Any]] = Field(default_factory=list)
    info: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_rpc(cls, payload: Dict[str, Any]) -> "CompiledContract":
        """
        Build from an eth_compileSolidity entry.

        Args:
            payload: {"code": "0x...", "info": {"abiDefinition": [...], ...}}
        """
        info = payload.get("info") or {}
        return cls(code=payload["code"], abi=info.get("abiDefinition") or [], info=info)


class TransactionRequest(BaseModel):
    """Transaction fields sent to the node."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_address: str = Field(..., alias="from")
    to: Optional[str] = None
    data: str
    gas: Optional[int] = None
    gas_price: Optional[int] = Field(None, alias="gasPrice")

    def with_gas(self, gas: int) -> "TransactionRequest":
        return self.model_copy(update={"gas": gas})

    def to_rpc(self) -> Dict[str, Any]:
        """Serialize with JSON-RPC field names, dropping unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Receipt(BaseModel):
    """Mined transaction receipt, stamped with the operation type"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tx_hash: str = Field(..., alias="transactionHash")
    block_number: Optional[int] = Field(None, alias="blockNumber")
    block_hash: Optional[str] = Field(None, alias="blockHash")
    transaction_index: Optional[int] = Field(None, alias="transactionIndex")
    from_address: Optional[str] = Field(None, alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    gas_used: Optional[int] = Field(None, alias="gasUsed")
    cumulative_gas_used: Optional[int] = Field(None, alias="cumulativeGasUsed")
    contract_address: Optional[str] = Field(None, alias="contractAddress")
    status: Optional[int] = None
    logs: List[Dict[str, Any]] = Field(default_factory=list)
    tx_type: Optional[int] = Field(None, validation_alias="type", serialization_alias="txType")
    receipt_type: Optional[ReceiptType] = Field(None, serialization_alias="receiptType")

    @field_validator(
        "block_number", "transaction_index", "gas_used", "cumulative_gas_used", "status", "tx_type",
        mode="before",
    )
    @classmethod
    def _decode_quantity(cls, value: Any) -> Any:
        if value is None:
            return None
        return decode_quantity(value)

    def stamp(self, receipt_type: ReceiptType, contract_address: Optional[str] = None) -> "Receipt":
        """Set the operation type and, when given, the contract address."""
        self.receipt_type = receipt_type
        if contract_address is not None:
            self.contract_address = contract_address
        return self
