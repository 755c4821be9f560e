# tests/conftest.py
from __future__ import annotations

import pytest

from limbnum import runtime


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Every test gets its own LIMBNUM_HOME and a fresh default runtime."""
    home = tmp_path / "limbnum-home"
    monkeypatch.setenv("LIMBNUM_HOME", str(home))
    runtime.reset()
    yield home
    runtime.reset()
