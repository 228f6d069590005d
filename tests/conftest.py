"""Pytest configuration and fixtures"""
import pytest
import os
import sys
import json

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests"""
    import tempfile
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def sample_tasks_data():
    """Sample today.json data for testing"""
    return [
        {
            "id": "4df78a0c1e2b4d5f9a8b7c6d5e4f3a2b",
            "name": "4th july dinner",
            "due": "2022-07-04T18:00:00Z"
        },
        {
            "id": "9b1c2d3e4f5a6b7c8d9e0f1a2b3c4d5e",
            "name": "Buy milk",
            "due": None
        },
        {
            "id": "4df7f00d1e2b4d5f9a8b7c6d5e4f3a2b",
            "name": "Far future",
            "due": "2999-01-01T00:00:00Z"
        }
    ]


@pytest.fixture
def temp_tasks_file(temp_dir, sample_tasks_data):
    """Create a temporary today.json file"""
    file_path = os.path.join(temp_dir, "today.json")
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(sample_tasks_data, f, ensure_ascii=False, indent=2)
    return file_path


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI commands attach handlers to captured streams; drop them after each test"""
    import logging
    yield
    logger = logging.getLogger('today')
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def mock_env_vars(monkeypatch, temp_dir):
    """Point all application paths to the temporary directory"""
    monkeypatch.setenv("TODAY_DATA_PATH", temp_dir)
    monkeypatch.setenv("TODAY_CONFIG_PATH", os.path.join(temp_dir, "config"))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
