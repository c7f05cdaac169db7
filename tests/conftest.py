# Shared fixtures for the palette test suite.

import asyncio

import pytest

from palette.services.command_registry import CommandRegistry
from palette.services.settings_service import RegistrySettings


@pytest.fixture
def registry():
    return CommandRegistry(RegistrySettings())


@pytest.fixture
def run():
    """Run a coroutine to completion (the dispatcher is async)."""

    def _run(coro):
        return asyncio.run(coro)

    return _run
