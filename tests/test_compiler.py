"""
Tests for ContractCompiler.
"""
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from ethcontract_sdk.compiler import ContractCompiler
from ethcontract_sdk.exceptions import CompilationError

from conftest import SIMPLE_STORAGE_ABI, TEST_CONTRACT_KEY, TEST_SOURCE


def test_compile_contract_returns_named_entry(mock_node, compiled_contract):
    compiler = ContractCompiler(mock_node, cache_size=0)
    assert compiler.compile_contract(TEST_SOURCE, TEST_CONTRACT_KEY) == compiled_contract
    mock_node.compile_source.assert_called_once_with(TEST_SOURCE)


def test_missing_key_is_fatal(mock_node):
    compiler = ContractCompiler(mock_node, cache_size=0)
    with pytest.raises(CompilationError) as excinfo:
        compiler.compile_contract(TEST_SOURCE, "Missing")

    assert excinfo.value.contract_key == "Missing"
    assert "Missing" in str(excinfo.value)


def test_without_cache_every_call_compiles(mock_node):
    compiler = ContractCompiler(mock_node, cache_size=0)
    compiler.compile(TEST_SOURCE)
    compiler.compile(TEST_SOURCE)
    assert mock_node.compile_source.call_count == 2


def test_cache_reuses_identical_source(mock_node):
    compiler = ContractCompiler(mock_node, cache_size=4)
    first = compiler.compile(TEST_SOURCE)
    second = compiler.compile(TEST_SOURCE)

    assert first == second
    assert mock_node.compile_source.call_count == 1


def test_cache_keys_on_source_text(mock_node):
    compiler = ContractCompiler(mock_node, cache_size=4)
    compiler.compile(TEST_SOURCE)
    compiler.compile(TEST_SOURCE + " ")
    assert mock_node.compile_source.call_count == 2


def test_clear_drops_cached_output(mock_node):
    compiler = ContractCompiler(mock_node, cache_size=4)
    compiler.compile(TEST_SOURCE)
    compiler.clear()
    compiler.compile(TEST_SOURCE)
    assert mock_node.compile_source.call_count == 2


def test_compile_errors_are_not_cached():
    node = MagicMock()
    node.compile_source.side_effect = [RuntimeError("syntax error"), {"A": MagicMock()}]
    compiler = ContractCompiler(node, cache_size=4)

    with pytest.raises(RuntimeError):
        compiler.compile(TEST_SOURCE)
    assert "A" in compiler.compile(TEST_SOURCE)


def test_cached_output_is_isolated_from_callers(mock_node):
    compiler = ContractCompiler(mock_node, cache_size=4)
    first = compiler.compile(TEST_SOURCE)
    first[TEST_CONTRACT_KEY].abi.clear()

    second = compiler.compile(TEST_SOURCE)

    assert second[TEST_CONTRACT_KEY].abi == SIMPLE_STORAGE_ABI
    assert mock_node.compile_source.call_count == 1


def test_compiled_contract_is_frozen(compiled_contract):
    with pytest.raises(ValidationError):
        compiled_contract.code = "0x00"
