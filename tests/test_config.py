"""
Tests for OrchestratorConfig.
"""
import pytest

from ethcontract_sdk.config import OrchestratorConfig
from ethcontract_sdk.constants import DEFAULT_CALL_GAS_LIMIT, DEFAULT_POLL_INTERVAL, DEFAULT_RECEIPT_TIMEOUT

from conftest import TEST_RPC_URL


def test_defaults():
    config = OrchestratorConfig(rpc_url=TEST_RPC_URL, gas_price=1)

    assert config.poll_interval == DEFAULT_POLL_INTERVAL
    assert config.receipt_timeout == DEFAULT_RECEIPT_TIMEOUT
    assert config.call_gas_limit == DEFAULT_CALL_GAS_LIMIT


def test_from_env():
    config = OrchestratorConfig.from_env({
        "ETHCONTRACT_RPC_URL": "http://localhost:8545",
        "ETHCONTRACT_GAS_PRICE": "20000000000",
        "ETHCONTRACT_POLL_INTERVAL_MS": "250",
        "ETHCONTRACT_RECEIPT_TIMEOUT_MS": "5000",
        "ETHCONTRACT_CALL_GAS_LIMIT": "4000000",
        "ETHCONTRACT_COMPILE_CACHE_SIZE": "0",
    })

    assert config.rpc_url == "http://localhost:8545"
    assert config.gas_price == 20_000_000_000
    assert config.poll_interval == 0.25
    assert config.receipt_timeout == 5.0
    assert config.call_gas_limit == 4_000_000
    assert config.compile_cache_size == 0


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("ETHCONTRACT_RPC_URL", TEST_RPC_URL)
    monkeypatch.setenv("ETHCONTRACT_GAS_PRICE", "5")
    monkeypatch.delenv("ETHCONTRACT_POLL_INTERVAL_MS", raising=False)

    config = OrchestratorConfig.from_env()

    assert config.gas_price == 5
    assert config.poll_interval == DEFAULT_POLL_INTERVAL


@pytest.mark.parametrize("missing", ["ETHCONTRACT_RPC_URL", "ETHCONTRACT_GAS_PRICE"])
def test_from_env_requires_values(missing):
    env = {"ETHCONTRACT_RPC_URL": TEST_RPC_URL, "ETHCONTRACT_GAS_PRICE": "5"}
    del env[missing]
    with pytest.raises(ValueError, match=missing):
        OrchestratorConfig.from_env(env)


@pytest.mark.parametrize("field,value", [
    ("gas_price", 0),
    ("poll_interval", 0),
    ("receipt_timeout", -1),
    ("compile_cache_size", -1),
])
def test_invalid_values(field, value):
    kwargs = {"rpc_url": TEST_RPC_URL, "gas_price": 1, field: value}
    with pytest.raises(ValueError):
        OrchestratorConfig(**kwargs)


def test_insecure_rpc_url_rejected(monkeypatch):
    monkeypatch.delenv("ETHCONTRACT_INSECURE_RPC", raising=False)
    with pytest.raises(ValueError):
        OrchestratorConfig(rpc_url="http://rpc.example.com", gas_price=1)


def test_config_is_frozen():
    config = OrchestratorConfig(rpc_url=TEST_RPC_URL, gas_price=1)
    with pytest.raises(ValueError):
        config.gas_price = 2
