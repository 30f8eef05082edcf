"""Pytest bootstrap for local source imports.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Make ``import lazynotes`` resolve to the local package, and
keep the user's real config file out of reach of any test.
"""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)


@pytest.fixture(autouse=True)
def isolated_config_path(monkeypatch):
    from lazynotes.runtime import config

    with tempfile.TemporaryDirectory() as tmp:
        monkeypatch.setattr(config, "CONFIG_PATH", Path(tmp) / "config.json")
        yield
