"""Shared pytest fixtures for the vecpath tests."""

import pytest


@pytest.fixture(autouse=True)
def check_path_invariants(monkeypatch):
    """Run the path consistency scan after every structural edit."""
    monkeypatch.setattr("vecpath.path.CHECK_INVARIANTS", True)
