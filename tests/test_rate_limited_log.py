"""
Tests for rate-limited logging.
"""
from unittest.mock import MagicMock

import pytest

from ethcontract_sdk._rate_limited_log import rate_limited_log, reset_rate_limits


@pytest.fixture(autouse=True)
def _reset():
    reset_rate_limits()
    yield
    reset_rate_limits()


def test_repeated_message_logged_once():
    mock_logger = MagicMock()

    assert rate_limited_log("node unreachable", "warning", mock_logger) is True
    assert rate_limited_log("node unreachable", "warning", mock_logger) is False

    mock_logger.warning.assert_called_once_with("node unreachable")


def test_distinct_messages_and_levels():
    mock_logger = MagicMock()

    rate_limited_log("a", "warning", mock_logger)
    rate_limited_log("b", "warning", mock_logger)
    rate_limited_log("a", "error", mock_logger)

    assert mock_logger.warning.call_count == 2
    mock_logger.error.assert_called_once_with("a")


def test_reset_allows_message_again():
    mock_logger = MagicMock()

    rate_limited_log("x", "info", mock_logger)
    reset_rate_limits()
    rate_limited_log("x", "info", mock_logger)

    assert mock_logger.info.call_count == 2
