"""Shared BDD fixtures for the cart."""

import pytest


@pytest.fixture()
def user_id():
    return "user-bdd-001"


@pytest.fixture()
def catalogue():
    """Products created during a scenario, keyed by their label."""
    return {}


@pytest.fixture()
def error():
    """Container for the error raised by the last cart operation."""
    return {"exc": None}
