"""
Version information for the ethcontract SDK.
"""
import importlib.metadata
import pathlib

import tomli

try:
    __version__ = importlib.metadata.version("ethcontract-sdk")
except importlib.metadata.PackageNotFoundError:
    # Fall back to reading from pyproject.toml for development
    try:
        path = pathlib.Path(__file__).parent.parent / "pyproject.toml"
        with open(path, "rb") as f:
            data = tomli.load(f)
        __version__ = data["project"]["version"]
    except (FileNotFoundError, KeyError):
        __version__ = "0.1.0"
