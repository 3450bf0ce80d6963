"""
Asynchronous confirmation of submitted transactions.

ReceiptWaiter.start() returns a ReceiptFuture at once and polls the node on
a dedicated thread until the receipt appears or the deadline passes. On
timeout the future is left pending rather than failed: the transaction
may still be mined, and callers decide whether to wait again.
"""
import logging
import threading
from concurrent.futures import Future
from enum import Enum
from typing import Optional

from ._rate_limited_log import rate_limited_log
from .constants import DEFAULT_POLL_INTERVAL, DEFAULT_RECEIPT_TIMEOUT
from .exceptions import NodeError
from .models import Receipt, ReceiptType
from .node import NodeClient

logger = logging.getLogger(__name__)


class WaiterState(str, Enum):
    """Lifecycle of a single receipt wait."""
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    RESOLVED = "RESOLVED"
    TIMED_OUT = "TIMED_OUT"


class ReceiptFuture(Future):
    """
    Future resolving to a stamped Receipt.

    Besides the usual Future API it exposes the waiter state so callers can
    tell "still pending after the deadline" apart from a resolved receipt.
    """

    def __init__(self, tx_hash: str, contract_address: Optional[str], receipt_type: ReceiptType):
        super().__init__()
        self.tx_hash = tx_hash
        self.contract_address = contract_address
        self.receipt_type = receipt_type
        self._waiter_state = WaiterState.SUBMITTED
        self._waiter_lock = threading.Lock()
        self._watchdog: Optional[threading.Timer] = None

    @property
    def state(self) -> WaiterState:
        with self._waiter_lock:
            return self._waiter_state

    @property
    def pending(self) -> bool:
        """True until a receipt has been delivered."""
        return not self.done()

    @property
    def timed_out(self) -> bool:
        return self.state is WaiterState.TIMED_OUT

    def _transition(self, new_state: WaiterState, *allowed: WaiterState) -> bool:
        with self._waiter_lock:
            if self._waiter_state not in allowed:
                return False
            self._waiter_state = new_state
            return True

    def __repr__(self) -> str:
        return (
            f"<ReceiptFuture tx_hash={self.tx_hash} type={self.receipt_type.value} "
            f"state={self.state.value}>"
        )


class ReceiptWaiter:
    """
    Polls the node for transaction receipts.

    Every start() gets its own polling thread and deadline timer; no state
    is shared between waits.
    """

    def __init__(
        self,
        node: NodeClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.node = node
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    def start(
        self,
        tx_hash: str,
        contract_address: Optional[str],
        receipt_type: ReceiptType,
        timeout: Optional[float] = None,
    ) -> ReceiptFuture:
        """
        Begin waiting for the receipt of `tx_hash`.

        Args:
            tx_hash: Hash of the submitted transaction
            contract_address: Address stamped onto the receipt, if given
            receipt_type: Type stamped onto the receipt
            timeout: Deadline in seconds (defaults to the waiter's timeout)

        Returns:
            A ReceiptFuture, returned without blocking

        Raises:
            ValueError: If timeout is not positive
        """
        deadline = self.timeout if timeout is None else timeout
        if deadline <= 0:
            raise ValueError("timeout must be positive")
        future = ReceiptFuture(tx_hash, contract_address, receipt_type)
        stop = threading.Event()

        watchdog = threading.Timer(deadline, self._expire, args=(future, stop))
        watchdog.daemon = True
        future._watchdog = watchdog

        worker = threading.Thread(
            target=self._poll,
            args=(future, stop),
            name=f"receipt-{tx_hash[:10]}",
            daemon=True,
        )
        watchdog.start()
        worker.start()
        return future

    def _describe(self, future: ReceiptFuture) -> str:
        return (
            f"Transaction hash {future.tx_hash}, contract address {future.contract_address}, "
            f"type {future.receipt_type.value}"
        )

    def _poll(self, future: ReceiptFuture, stop: threading.Event) -> None:
        if not future.set_running_or_notify_cancel():
            # Abandoned before polling began
            stop.set()
            future._watchdog.cancel()
            return
        if not future._transition(WaiterState.POLLING, WaiterState.SUBMITTED):
            return

        while not stop.is_set():
            try:
                receipt = self.node.get_transaction_receipt(future.tx_hash)
            except NodeError as e:
                rate_limited_log(f"Receipt poll failed, retrying. {self._describe(future)}: {e}", "warning", self.logger)
                receipt = None
            except Exception as e:
                self.logger.warning(f"Receipt task interrupted. {self._describe(future)}: {e}")
                return

            if receipt is not None:
                self._resolve(future, receipt)
                return
            stop.wait(self.poll_interval)

    def _resolve(self, future: ReceiptFuture, receipt: Receipt) -> None:
        if not future._transition(WaiterState.RESOLVED, WaiterState.POLLING):
            self.logger.debug(f"Discarding receipt after deadline. {self._describe(future)}")
            return
        future._watchdog.cancel()
        receipt.stamp(future.receipt_type, future.contract_address)
        self.logger.debug(f"receipt: {receipt}")
        future.set_result(receipt)

    def _expire(self, future: ReceiptFuture, stop: threading.Event) -> None:
        stop.set()
        if future._transition(WaiterState.TIMED_OUT, WaiterState.SUBMITTED, WaiterState.POLLING):
            self.logger.warning(f"Cancel non-finished receipt task. {self._describe(future)}")
