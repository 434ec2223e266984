"""Shared fixtures for ManaChess tests."""

import pytest

from manachess.config import ManaConfig, RulesConfig


@pytest.fixture
def full_mana_config():
    """Both sides start at their 3-mana cap."""
    return RulesConfig(
        starting_mana=ManaConfig(white=3, black=3),
        max_mana=ManaConfig(white=3, black=3),
    )
