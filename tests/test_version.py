"""
Tests for version information.
"""
import ethcontract_sdk
from ethcontract_sdk.version import __version__


def test_version_is_exported():
    assert ethcontract_sdk.__version__ == __version__
    assert isinstance(__version__, str)
    assert __version__.count(".") >= 1
