"""
Shared fixtures for the arcvfs tests.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""
import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest

from arcvfs import ArchiveFS
from arcvfs.core.handler_manager import HandlerManager


@pytest.fixture(autouse=True)
def clean_config():
    """Every test starts and ends with default configuration and fresh handler availability."""
    fs = ArchiveFS()
    fs.config.reset()
    yield
    fs.config.reset()
    HandlerManager.refresh()


@pytest.fixture
def fs():
    return ArchiveFS()
