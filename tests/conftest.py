"""
Test configuration and fixtures for the ordering test suite.

This file contains shared fixtures and configuration for all tests.
"""

import os
import sys
import pytest
from unittest.mock import patch

# Add project root to Python path so we can import app modules
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from tests.fixtures.sample_data import (
    generate_sample_board,
    generate_sample_cards,
    MALFORMED_KEYS,
    ORDERED_VALID_KEYS,
)


@pytest.fixture
def sample_cards():
    """Twenty cards appended one after another."""
    return generate_sample_cards(20)


@pytest.fixture
def sample_board():
    """Board with six lists, each holding a random number of cards."""
    return generate_sample_board(6)


@pytest.fixture
def ordered_valid_keys():
    """Valid keys across several integer bands, in increasing order."""
    return list(ORDERED_VALID_KEYS)


@pytest.fixture(params=MALFORMED_KEYS, ids=[reason for _, reason in MALFORMED_KEYS])
def malformed_key(request):
    """Each structurally invalid key in turn."""
    return request.param[0]


@pytest.fixture
def clean_order_key_env():
    """Run with no ORDER_KEY_* settings and no .env file loaded."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("ORDER_KEY_")}
    with patch.dict(os.environ, env, clear=True):
        with patch("scripts.generate_order_keys.load_dotenv") as mock_load:
            yield mock_load
