"""
Pytest configuration and fixtures for lox_runtime tests.
"""

import os
import sys

import pytest

# Add grandparent directory to path for imports (to find lox_runtime package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lox_runtime.runtime import LoxRuntime


@pytest.fixture
def output():
    """Lines printed by the program under test"""
    return []


@pytest.fixture
def runtime(output):
    """Runtime whose print statements append to `output`"""
    return LoxRuntime(output=output.append, clock=lambda: 1234.5)
