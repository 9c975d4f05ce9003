"""
Shared pytest fixtures for the RRULE decoder tests.

- decoders for each duplicate-part behavior
- isolated Settings pointing at a temporary YAML config
- a FastAPI test client wired to those settings
"""

import pytest
from fastapi.testclient import TestClient

from core.config import Settings, get_settings
from core.models import DecoderOptions, DuplicatePartBehavior
from services.rrule_decoder import RecurrenceRuleDecoder


@pytest.fixture
def decoder():
    """Strict decoder: duplicate parts are errors."""
    return RecurrenceRuleDecoder()


@pytest.fixture
def decoder_for():
    """
    Returns a factory building a decoder for a given behavior.

    Usage:
        def test_something(decoder_for):
            rule = decoder_for(DuplicatePartBehavior.TAKE_LAST).decode("RRULE:FREQ=DAILY")
    """

    def _make(behavior: DuplicatePartBehavior) -> RecurrenceRuleDecoder:
        return RecurrenceRuleDecoder(DecoderOptions(duplicate_part_behavior=behavior))

    return _make


@pytest.fixture
def config_file(tmp_path):
    """Path of a not-yet-written YAML config in a temp directory."""
    return tmp_path / "config.yaml"


@pytest.fixture
def settings(config_file, monkeypatch):
    """Settings isolated from the process environment and any .env file."""
    monkeypatch.delenv("RRULE_DUPLICATE_PART_BEHAVIOR", raising=False)
    return Settings(_env_file=None, APP_CONFIG_PATH=str(config_file))


@pytest.fixture
def client(settings):
    from app.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
