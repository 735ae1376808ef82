"""Root conftest.py for pytest configuration.

This file configures pytest for the entire project, ensuring:
- Proper Python path setup for imports
- Test settings (in-memory SQLite, no real backend credentials)
- Local-only Logfire configuration
- Shared fixtures: database sessions, a fake text-generation client,
  pipeline runners and an API client
"""

import os
import sys
from pathlib import Path
from typing import Callable, List, Optional
from uuid import uuid4

# Settings are read at import time, so test values must be in place first
os.environ["DB_HOST"] = ""
os.environ["SQLITE_PATH"] = ":memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")

import logfire
import pytest
from sqlalchemy.orm import sessionmaker


# ============================================================================
# Python Path Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom settings and ensure project root is in sys.path."""

    project_root = Path(__file__).parent.resolve()
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    # Register custom markers
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests that touch the database or the HTTP layer"
    )
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests (fast, no external dependencies)"
    )

    # Spans stay local during tests
    logfire.configure(
        service_name="text_pipeline_tests",
        environment="test",
        send_to_logfire=False,
        console=False,
    )
    logfire.instrument_pydantic_ai()

    logfire.info(
        "Starting test suite",
        project_root=str(project_root),
    )


def pytest_sessionfinish(session, exitstatus):
    """Log test session completion with summary statistics."""
    logfire.info(
        "Test suite completed",
        exit_status=exitstatus,
        tests_collected=session.testscollected,
        tests_failed=session.testsfailed,
    )


# ============================================================================
# Text Generation Fixtures
# ============================================================================

class FakeTextClient:
    """
    Stand-in for TextGenerationClient.

    Records every request. `handler(request)` decides the response text;
    returning None simulates an empty backend response and raising simulates
    a transport failure.
    """

    def __init__(self, handler: Optional[Callable] = None):
        self.requests: List = []
        self.handler = handler or (lambda request: f"output {len(self.requests)}")

    async def generate(self, request):
        from pipeline.core.text_generation import GenerationResponse

        self.requests.append(request)
        return GenerationResponse(text=self.handler(request))


@pytest.fixture
def fake_client():
    """A FakeTextClient answering 'output 1', 'output 2', ..."""
    return FakeTextClient()


@pytest.fixture
def step_processor(fake_client):
    """StepProcessor backed by the fake client."""
    from pipeline.steps.processor import StepProcessor

    return StepProcessor(client=fake_client, model="test-model")


@pytest.fixture
def pipeline_runner(step_processor):
    """PipelineRunner without timeouts, backed by the fake client."""
    from pipeline.core.runner import PipelineRunner

    return PipelineRunner(processor=step_processor)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite database with every table created."""
    import models  # noqa: F401  (registers tables on Base.metadata)
    from database.base import Base, build_engine

    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test database."""
    return sessionmaker(bind=db_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    """Database session for one test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_user(db_session):
    """A persisted user owning the pipelines created in a test."""
    from models.user import User

    user_id = uuid4()
    user = User(id=user_id, email=f"test-{user_id.hex}@example.com", name="Test User")
    db_session.add(user)
    db_session.commit()

    logfire.info("Test user created", user_id=str(user_id))
    return user


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def api_client(session_factory, pipeline_runner):
    """
    FastAPI TestClient wired to the test database and the fake-client runner.

    The lifespan is not entered, so no startup checks run.
    """
    from fastapi.testclient import TestClient

    from api.dependencies import get_pipeline_runner
    from database import get_db
    from main import app

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_pipeline_runner] = lambda: pipeline_runner

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
