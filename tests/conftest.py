"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging
import sqlite3
from datetime import date

import pytest

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires API keys and external services)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (may require external services)"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled (use --run-integration to enable)."
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """
    Configure logging for tests.

    Sets up log capture and configures log levels.
    This fixture runs automatically for all tests.
    """
    caplog.set_level(logging.DEBUG)
    yield


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def mock_openai_api_key(monkeypatch):
    """
    Mock OpenAI API key for tests that require it.

    This prevents tests from attempting real API calls.
    Runs automatically for all tests.
    """
    from askdb.config import clear_settings_cache

    clear_settings_cache()
    monkeypatch.setenv("ASKDB_ENV_SOURCE", "environment")

    test_key = "sk-test-key-1234567890-abcdefghijklmnop"  # 20+ chars
    monkeypatch.setenv("LLM_OPENAI_API_KEY", test_key)
    yield test_key

    clear_settings_cache()


# ============================================================================
# Common Test Data
# ============================================================================


@pytest.fixture
def sample_question() -> str:
    """Sample user question for testing."""
    return "How many transactions happened last month?"


@pytest.fixture
def fixed_today():
    """Deterministic clock for prompt rendering."""
    return lambda: date(2024, 3, 15)


# ============================================================================
# Scripted LLM Provider
# ============================================================================


@pytest.fixture
def scripted_provider():
    """
    LLM provider that replays queued responses and records every request.

    Usage:
        async def test_something(scripted_provider):
            provider = scripted_provider("SELECT 1", "Answer: one")
            ...
            assert provider.requests[0].stop == "\\nSQLResult:"

    Queue an exception instance to have generate() raise it.
    """
    from askdb.llm.base import BaseLLMProvider
    from askdb.llm.models import LLMResponse

    class ScriptedProvider(BaseLLMProvider):
        def __init__(self, responses):
            super().__init__(provider_name="scripted", model="scripted-model")
            self.responses = list(responses)
            self.requests = []

        async def generate(self, request):
            request = self._apply_defaults(request)
            self.requests.append(request)
            if not self.responses:
                raise AssertionError("No scripted response left")
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return LLMResponse(content=response, model=self.model, provider=self.provider_name)

        @property
        def prompts(self):
            return [request.messages[0].content for request in self.requests]

    def _create(*responses):
        return ScriptedProvider(responses)

    return _create


# ============================================================================
# SQLite Ledger Database
# ============================================================================


@pytest.fixture
def ledger_db(tmp_path):
    """
    Small accounting database on disk.

    Tables: accounts, transactions (37 rows), trial_balance.
    """
    path = tmp_path / "ledger.db"
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE accounts (id INTEGER PRIMARY KEY, name TEXT, number TEXT);
        CREATE TABLE transactions (
            id INTEGER PRIMARY KEY,
            account_id INTEGER,
            amount NUMERIC,
            transaction_type TEXT,
            posted_on DATE
        );
        CREATE TABLE trial_balance (account_id INTEGER, balance NUMERIC, period TEXT);
        INSERT INTO accounts (id, name, number) VALUES (1, 'Cash', '1000'), (2, 'Revenue', '4000');
        """
    )
    conn.executemany(
        "INSERT INTO transactions (account_id, amount, transaction_type, posted_on) "
        "VALUES (?, ?, ?, ?)",
        [
            (1 + i % 2, 10 * (i + 1), "credit" if i % 2 else "debit", "2024-02-%02d" % (1 + i % 28))
            for i in range(37)
        ],
    )
    conn.commit()
    conn.close()
    return path
