"""Shared test fixtures and configuration for the test suite."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add the parent directory to the path for imports
import sys

sys.path.append(str(Path(__file__).parent.parent))

from tasklist.config import Settings
from tasklist.main import create_app
from tasklist.models.task import Task
from tasklist.services.local_storage import MemoryStorage
from tasklist.services.task_service import TaskService
from tasklist.services.task_store import TaskStore


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """Create test settings pointing at a temporary storage file."""
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)

        settings = Settings(
            storage_file=temp_path / "data" / "tasklist.json",
            storage_key="taskList",
            log_level="DEBUG",
            environment="test",
        )

        yield settings


@pytest.fixture
def storage() -> MemoryStorage:
    """In-memory key-value storage."""
    return MemoryStorage()


@pytest.fixture
def task_store(storage) -> TaskStore:
    """Create an empty task store over in-memory storage."""
    return TaskStore(storage)


@pytest.fixture
def task_service(task_store) -> TaskService:
    """Create a task service instance for testing."""
    return TaskService(task_store)


@pytest.fixture
def client(test_settings) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_task() -> Task:
    """Create a sample task for testing."""
    return Task(title="Buy milk", description="2%", date="2024-06-01", time="08:00")


# Test data fixtures
@pytest.fixture
def sample_task_data():
    """Sample form data for testing."""
    return {
        "title": "Buy milk",
        "description": "2%",
        "date": "2024-06-01",
        "time": "08:00",
    }


@pytest.fixture
def other_task_data():
    """A second set of form data."""
    return {
        "title": "Call plumber",
        "description": "Kitchen sink",
        "date": "2024-06-02",
        "time": "10:30",
    }


@pytest.fixture
def always_confirm():
    """Confirmation prompt that accepts."""
    return lambda prompt: True


@pytest.fixture
def never_confirm():
    """Confirmation prompt that declines."""
    return lambda prompt: False
