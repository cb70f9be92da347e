"""
Shared pytest fixtures for all tests.

Provides config isolation and common arrangement fixtures.
"""

import pytest

from app.api.v1.dependencies import clear_caches
from app.domain.arrangement import Board, Group, Item


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """
    Automatically isolate config for all tests.

    Forces in-memory persistence and resets cached settings and
    repositories around each test.
    """
    monkeypatch.setenv("USE_MEMORY_PERSISTENCE", "true")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SYNC_DEBOUNCE_SECONDS", "0")
    monkeypatch.setenv("LOG_FORMAT", "text")
    clear_caches()

    yield

    clear_caches()


# =============================================================================
# MODEL FIXTURES
# =============================================================================

@pytest.fixture
def kanban_board() -> Board:
    """Three columns with two cards each; 'done' has a WIP limit of 2."""
    groups = [
        Group(id="todo", name="To Do"),
        Group(id="doing", name="In Progress"),
        Group(id="done", name="Done", capacity=2),
    ]
    items = [
        Item(id="A", parent_id="todo"),
        Item(id="B", parent_id="todo"),
        Item(id="C", parent_id="doing"),
        Item(id="D", parent_id="doing"),
        Item(id="E", parent_id="done"),
        Item(id="F", parent_id="done"),
    ]
    return Board(groups, items)
