"""Test configuration and fixtures for booknotes."""

from tests.fixtures import *  # noqa: F401,F403
