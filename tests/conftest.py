"""Test configuration and shared fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from askbot.registry import PromptRegistry


@pytest.fixture
def bot() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def registry() -> PromptRegistry:
    return PromptRegistry()
