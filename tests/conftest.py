"""
Global test configuration for the ledger agent test suite.
"""

from contextlib import suppress
import logging
import os
from unittest.mock import patch

import pytest

from ledger_agent.config import FrozenConfig


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-in escape hatch: mark a test with @pytest.mark.allow_dotenv
    to permit .env loading for that specific test.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_ledger_env(request):
    """Run each test with no LEDGER_AGENT_* variables, restoring the env after.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        yield
        return
    clean = {k: v for k, v in os.environ.items() if not k.startswith("LEDGER_AGENT_")}
    with patch.dict(os.environ, clean, clear=True):
        yield


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked transports",
        "contract: Properties every extraction must satisfy",
        "allow_dotenv: Permit python-dotenv to load files in this test",
        "allow_env_pollution: Keep LEDGER_AGENT_* variables from the outer env",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "sk-test_12345_67890_abcdef"


@pytest.fixture
def frozen_config(mock_api_key):
    """Minimal client configuration pointing at a fake endpoint."""
    return FrozenConfig(
        api_key=mock_api_key,
        endpoint="https://agent.example.test/v3/inference/chat/",
        categorizer_agent_id="categorizer-agent",
        summary_agent_id="summary-agent",
    )


@pytest.fixture
def grocery_reply():
    """Categorizer reply wrapped in prose and a json fence."""
    return (
        "Sure! Here is the result:\n"
        "```json\n"
        '{"result": {"suggested_category": "Groceries", "confidence_score": 0.92, '
        '"alternative_categories": ["Dining Out"], '
        '"reasoning": "matches grocery keywords"}}\n'
        "```\n"
        "Let me know if you need anything else."
    )


@pytest.fixture
def single_quoted_summary_reply():
    """Summary reply using single quotes and a trailing comma."""
    return (
        "{'summary': 'spent a lot', 'insights': [], 'recommendations': [], "
        "'statistics': {'total_spend': 120.5, 'top_category': 'Rent', "
        "'unusual_patterns': []},}"
    )
