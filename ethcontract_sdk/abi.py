"""
Minimal ABI support for calling methods on a compiled contract.

Encodes a single method call and decodes its outputs into tagged scalar
values; it is not a general-purpose ABI encoder.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from web3 import Web3

from .constants import SELECTOR_LENGTH
from .exceptions import ContractError, NoSuchContractMethodError


class ScalarKind(str, Enum):
    """Kinds of decoded result values."""
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ADDRESS = "address"
    BYTES = "bytes"
    OTHER = "other"


def _kind_for(abi_type: str) -> ScalarKind:
    if abi_type.endswith("]") or abi_type.startswith("tuple"):
        return ScalarKind.OTHER
    if abi_type == "string":
        return ScalarKind.STRING
    if abi_type == "bool":
        return ScalarKind.BOOLEAN
    if abi_type == "address":
        return ScalarKind.ADDRESS
    if abi_type.startswith(("uint", "int")):
        return ScalarKind.INTEGER
    if abi_type.startswith("bytes"):
        return ScalarKind.BYTES
    return ScalarKind.OTHER


@dataclass(frozen=True)
class DecodedValue:
    """
    A decoded method output tagged with its scalar kind.

    `text` is the string form callers have always received; `value`
    keeps the native Python value.
    """
    kind: ScalarKind
    value: Any
    abi_type: str = ""

    @property
    def text(self) -> str:
        if self.kind is ScalarKind.BOOLEAN:
            return "true" if self.value else "false"
        if self.kind is ScalarKind.BYTES:
            return "0x" + bytes(self.value).hex()
        return str(self.value)

    def __str__(self) -> str:
        return self.text

    @classmethod
    def from_abi(cls, abi_type: str, value: Any) -> "DecodedValue":
        return cls(kind=_kind_for(abi_type), value=value, abi_type=abi_type)


class ContractABI:
    """Lookup, call encoding and output decoding over a contract ABI."""

    def __init__(self, abi: Sequence[Dict[str, Any]]):
        self.abi = list(abi)

    def function(self, name: str) -> Dict[str, Any]:
        """
        Find a function entry by name.

        Raises:
            NoSuchContractMethodError: If the ABI has no such function
        """
        for entry in self.abi:
            if entry.get("type", "function") == "function" and entry.get("name") == name:
                return entry
        raise NoSuchContractMethodError(name)

    def has_function(self, name: str) -> bool:
        try:
            self.function(name)
        except NoSuchContractMethodError:
            return False
        return True

    @staticmethod
    def _types(params: Optional[List[Dict[str, Any]]]) -> List[str]:
        return [param["type"] for param in params or []]

    def selector(self, name: str) -> bytes:
        input_types = self._types(self.function(name).get("inputs"))
        signature = f"{name}({','.join(input_types)})"
        return bytes(Web3.keccak(text=signature))[:SELECTOR_LENGTH]

    def encode_call(self, name: str, args: Sequence[Any] = ()) -> str:
        """
        ABI-encode a method call.

        Args:
            name: Function name
            args: Positional arguments

        Returns:
            0x-prefixed hex calldata

        Raises:
            NoSuchContractMethodError: If the ABI has no such function
            ValueError: If the argument count does not match the inputs
        """
        input_types = self._types(self.function(name).get("inputs"))
        if len(args) != len(input_types):
            raise ValueError(f"{name} takes {len(input_types)} arguments, got {len(args)}")
        encoded_args = encode(input_types, list(args)) if input_types else b""
        return "0x" + self.selector(name).hex() + encoded_args.hex()

    def decode_output(self, name: str, data: str) -> Tuple[DecodedValue, ...]:
        """
        Decode the return data of a call.

        Args:
            name: Function name
            data: 0x-prefixed hex return data

        Returns:
            One DecodedValue per declared output; empty when the call
            returned no data

        Raises:
            ContractError: If the data does not match the declared outputs
        """
        output_types = self._types(self.function(name).get("outputs"))
        raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
        if not output_types or not raw:
            return ()
        try:
            values = decode(output_types, raw)
        except DecodingError as e:
            raise ContractError(f"cannot decode output of {name}: {e}") from e
        return tuple(DecodedValue.from_abi(abi_type, value) for abi_type, value in zip(output_types, values))
