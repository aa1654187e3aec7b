import logging

import pytest

from collapsibletree.config import TreeConfig


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@pytest.fixture
def eve_data():
    r"""
    Eve
    /  \
  Cain  Seth
          |
         Enos
    """
    return {
        "name": "Eve",
        "children": [
            {"name": "Cain"},
            {"name": "Seth", "children": [{"name": "Enos"}]},
        ],
    }


@pytest.fixture
def fast_config():
    """Config that renders every frame without sleeping."""
    return TreeConfig(realtime=False, fps=20, duration_ms=250)
