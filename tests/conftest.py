"""
Shared pytest fixtures for all tests.

Provides configuration isolation and digital book fixtures.
"""

import pytest

from digitalbook.domain import WizardController
from digitalbook.persistence import InMemoryBookRepository
from digitalbook.settings import get_settings
from tests.helpers.spy_book_repository import SpyBookRepository


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """
    Automatically isolate config for all tests.

    Pins the environment variables settings read and clears the cached
    settings instance before and after each test.
    """
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DIGITALBOOK_API_BASE", "http://testserver")
    monkeypatch.setenv("DIGITALBOOK_API_TOKEN", "test-token-not-real")
    monkeypatch.setenv("LOG_FORMAT", "text")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================

@pytest.fixture
def memory_repo() -> InMemoryBookRepository:
    return InMemoryBookRepository()


@pytest.fixture
def spy_repo(memory_repo) -> SpyBookRepository:
    return SpyBookRepository(memory_repo)


@pytest.fixture
def wizard(spy_repo) -> WizardController:
    return WizardController(spy_repo)
