"""Test fixtures for Gnosis Mage tests."""

import pytest

from mage import Grimoire, MageConfig
from mage.config import Config


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep MAGE_* variables and the config singleton out of tests."""
    monkeypatch.delenv("MAGE_DEBUG", raising=False)
    monkeypatch.delenv("MAGE_DEFAULT_NAMESPACE", raising=False)
    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def sample_config():
    """Sample configuration for testing."""
    return MageConfig(debug=True, log_to_stdout=False)


@pytest.fixture
def grimoire():
    """A fresh grimoire with debugging off."""
    return Grimoire(config=MageConfig(log_to_stdout=False))


@pytest.fixture
def debug_grimoire(sample_config):
    """A fresh grimoire with debugging on."""
    return Grimoire(config=sample_config)


@pytest.fixture
def greeter(grimoire):
    """A ``greeter`` namespace with a couple of functions."""
    grimoire.create("greeter", "greet", lambda: "Hello")
    grimoire.create("greeter", "shout", lambda text: text.upper())
    return grimoire

