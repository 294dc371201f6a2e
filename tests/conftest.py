from __future__ import annotations

import pytest

from primecalc.runtime import reset


@pytest.fixture(autouse=True)
def fresh_runtime(tmp_path, monkeypatch):
    """Isolated workspace and default runtime settings for every test."""
    monkeypatch.setenv("PRIMECALC_HOME", str(tmp_path / "workspace"))
    return reset()
