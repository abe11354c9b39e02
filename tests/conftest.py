"""Shared fixtures for engine tests."""
from __future__ import annotations

import pytest

from numengine.contract import EngineContract, build_contract
from numengine.engine import NumericEngine


@pytest.fixture
def engine() -> NumericEngine:
    return NumericEngine()


@pytest.fixture(scope="session")
def contract() -> EngineContract:
    return build_contract()
