# tests/conftest.py
import pytest

from gtasa_extractor.utils import close_logging, init_logging


@pytest.fixture(autouse=True)
def console_logging():
    """Fresh console-only logging state for every test."""
    close_logging()
    init_logging()
    yield
    close_logging()
