"""Shared test configuration and fixtures."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from topic_tools.config import Settings

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")


@pytest.fixture
def settings() -> Settings:
    """Settings for a dry run: files are written but never checked out."""
    return Settings(live_run=False)
