"""
Pytest fixtures for frontend/Flask tests.
"""

import os
import pytest
from unittest.mock import MagicMock

from langchain_core.messages import AIMessage


@pytest.fixture(scope="session", autouse=True)
def set_test_env():
    """Set test environment variables."""
    os.environ["OPENAI_API_KEY"] = "sk-test-mock-key"
    os.environ.pop("MONGODB_URI", None)


@pytest.fixture
def app():
    """Flask app fixture with test configuration."""
    from frontend.app import app
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def fake_llm():
    """Chat model stand-in returned by the gateways' lazy factory."""
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content="  Tailored output  ")
    return llm
