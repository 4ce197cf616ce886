"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from .stubs import StubLLM


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()
