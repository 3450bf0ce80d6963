"""
Configuration for the contract orchestrator.
"""
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_CALL_GAS_LIMIT,
    DEFAULT_COMPILE_CACHE_SIZE,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RECEIPT_TIMEOUT,
    DEFAULT_RETRY_COUNT,
)
from .node import validate_rpc_url

ENV_PREFIX = "ETHCONTRACT_"


class OrchestratorConfig(BaseModel):
    """Process-wide settings, fixed for the lifetime of an orchestrator"""
    model_config = ConfigDict(frozen=True)

    rpc_url: str
    gas_price: int = Field(..., gt=0)
    poll_interval: float = Field(DEFAULT_POLL_INTERVAL, gt=0)
    receipt_timeout: float = Field(DEFAULT_RECEIPT_TIMEOUT, gt=0)
    call_gas_limit: int = Field(DEFAULT_CALL_GAS_LIMIT, gt=0)
    compile_cache_size: int = Field(DEFAULT_COMPILE_CACHE_SIZE, ge=0)
    retry_count: int = Field(DEFAULT_RETRY_COUNT, ge=0)
    timeout: int = Field(DEFAULT_HTTP_TIMEOUT, gt=0)

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, value: str) -> str:
        validate_rpc_url(value)
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OrchestratorConfig":
        """
        Build configuration from ETHCONTRACT_* environment variables.

        Poll interval and receipt timeout are read in milliseconds.

        Raises:
            ValueError: If a required variable is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        def _get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value not in (None, "") else None

        rpc_url = _get("RPC_URL")
        gas_price = _get("GAS_PRICE")
        if rpc_url is None:
            raise ValueError(f"{ENV_PREFIX}RPC_URL is required")
        if gas_price is None:
            raise ValueError(f"{ENV_PREFIX}GAS_PRICE is required")

        values = {"rpc_url": rpc_url, "gas_price": int(gas_price)}
        poll_ms = _get("POLL_INTERVAL_MS")
        if poll_ms is not None:
            values["poll_interval"] = int(poll_ms) / 1000.0
        timeout_ms = _get("RECEIPT_TIMEOUT_MS")
        if timeout_ms is not None:
            values["receipt_timeout"] = int(timeout_ms) / 1000.0
        call_gas_limit = _get("CALL_GAS_LIMIT")
        if call_gas_limit is not None:
            values["call_gas_limit"] = int(call_gas_limit)
        cache_size = _get("COMPILE_CACHE_SIZE")
        if cache_size is not None:
            values["compile_cache_size"] = int(cache_size)
        return cls(**values)
