"""
Gas policy for contract transactions.
"""
import logging
from typing import Union

from .exceptions import GasExceededError

logger = logging.getLogger(__name__)


def decode_quantity(quantity: Union[str, int, None]) -> int:
    """
    Decode a node quantity into a plain integer.

    Nodes encode quantities as 0x-prefixed hex strings; some clients
    already hand back ints.

    Args:
        quantity: Hex string (e.g. "0x5208") or int

    Returns:
        Integer value

    Raises:
        ValueError: If the quantity cannot be decoded
    """
    if isinstance(quantity, bool) or quantity is None:
        raise ValueError(f"Invalid quantity: {quantity!r}")
    if isinstance(quantity, int):
        return quantity
    text = quantity.strip()
    if text.lower().startswith("0x"):
        return int(text, 16) if len(text) > 2 else 0
    return int(text)


def check_gas(account_address: str, allowance: int, estimated_gas: int) -> None:
    """
    Reject a transaction whose estimated cost exceeds the account allowance.

    Args:
        account_address: Account paying for the transaction
        allowance: Gas the account authorizes
        estimated_gas: Node estimate for the transaction

    Raises:
        GasExceededError: If allowance < estimated_gas
    """
    if allowance < estimated_gas:
        logger.debug(f"Rejecting transaction for {account_address}: estimate {estimated_gas} > allowance {allowance}")
        raise GasExceededError(account_address, allowance, estimated_gas)
