import logging

import pytest

from punchcard import (
    PunchCard,
    encode_text,
    example_object_deck_card,
    example_source_card,
)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "property: hypothesis property-based tests for the codecs"
    )


@pytest.fixture
def blank_card():
    """Fixture providing a fresh blank text card."""
    return PunchCard.blank()


@pytest.fixture
def hello_card():
    """Fixture providing a text card punched with HELLO WORLD."""
    return encode_text("HELLO WORLD")


@pytest.fixture
def source_card():
    return example_source_card()


@pytest.fixture
def object_card():
    return example_object_deck_card()


@pytest.fixture
def preserve_root_logger():
    """Restore root logger handlers and level changed by setup_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
