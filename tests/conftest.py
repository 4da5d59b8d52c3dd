"""Shared pytest fixtures."""

import pytest
from pathlib import Path


@pytest.fixture
def examples_dir():
    """Path to tests/examples/ containing workspace .json files."""
    return Path(__file__).parent / "examples"


@pytest.fixture(params=["start_wait_type.json", "repeat_loop.json", "two_chains.json"])
def example_file(examples_dir, request):
    """Parametrized: one of the example workspaces."""
    return examples_dir / request.param


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep a developer's blockmacro.yaml / .env / BLOCKMACRO_* out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("BLOCKMACRO_AGENT_URL", "BLOCKMACRO_TIMEOUT", "BLOCKMACRO_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
