"""Shared pytest fixtures."""

import pytest

from hookchain import FilterRegistry, hook


@pytest.fixture
def registry():
    """A fresh registry so tests never touch the process-wide default."""
    return FilterRegistry()


@pytest.fixture
def shout(registry):
    """Hooked 'shout' operation whose terminal returns the word unchanged."""

    def _shout(word, **extra):
        return hook(
            "shout",
            {"word": word, **extra},
            lambda args: args["word"],
            owner="words",
            registry=registry,
        )

    return _shout
