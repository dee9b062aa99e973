import json
import sys
from pathlib import Path

import pytest
from loguru import logger

from nestegg.schema import Assumptions


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def sample_assumptions_dict() -> dict:
    return json.loads(Path("sample_assumptions.json").read_text(encoding="utf-8"))


@pytest.fixture
def sample_assumptions(sample_assumptions_dict) -> Assumptions:
    return Assumptions.from_dict(sample_assumptions_dict)
