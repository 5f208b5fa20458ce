"""Shared fixtures for offline unit tests."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from wasfa.services.gemini import GeminiClient


def fake_genai_client(text=None, side_effect=None) -> MagicMock:
    """Stand-in for google.genai.Client: models.generate_content returns an object with .text."""
    client = MagicMock()
    if side_effect is not None:
        client.models.generate_content.side_effect = side_effect
    else:
        client.models.generate_content.return_value = SimpleNamespace(text=text)
    return client


@pytest.fixture
def make_gemini():
    """Factory for GeminiClient instances backed by a fake SDK client."""

    def _make(text=None, side_effect=None, **kwargs) -> GeminiClient:
        params = {
            "api_key": "test-key",
            "timeout_seconds": 5.0,
            "max_retries": 1,
            "delay_between_retries": 0.0,
        }
        params.update(kwargs)
        return GeminiClient(client=fake_genai_client(text=text, side_effect=side_effect), **params)

    return _make
