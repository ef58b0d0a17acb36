"""
Root pytest configuration for Livestock News Finder tests

Adds project root to Python path and provides common fixtures
"""
import sys
import os
from datetime import date

import pytest
from dotenv import load_dotenv

# Add project root to Python path so tests can import livestock_news
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# Load environment variables
load_dotenv()


@pytest.fixture
def today():
    """Fixed reference date so recency and date tests are deterministic."""
    return date(2024, 3, 20)


@pytest.fixture
def app():
    """Flask app with default configuration in testing mode."""
    from livestock_news import create_app

    return create_app({'TESTING': True})


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
