"""Pytest configuration and fixtures for integration tests.

Loads .env and skips the whole suite when GEMINI_API_KEY is missing. The
YouTube tests additionally need YOUTUBE_API_KEY and skip on their own.
"""

import os
import pytest
from dotenv import load_dotenv
from pathlib import Path


def pytest_configure(config):
    """Load .env before collection and keep integration runs off the shared cache."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    # Each run should reach the live APIs instead of replaying cached bundles
    os.environ["ENABLE_CACHE"] = "false"

    print("\n" + "=" * 70)
    print("Note: These tests call the live Gemini and YouTube APIs")
    print(f"Environment loaded from: {env_path}")
    print("Test configuration:")
    print("  - Recipe cache: DISABLED")
    print(f"  - YouTube enrichment: {'ENABLED' if os.getenv('YOUTUBE_API_KEY') else 'DISABLED'}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip every integration test when GEMINI_API_KEY is not configured."""
    if not os.getenv("GEMINI_API_KEY"):
        pytest.skip(
            "Integration tests skipped. Missing API key: GEMINI_API_KEY. Please set it in your .env file.",
            allow_module_level=True,
        )
