from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()

from shared import logging_config  # noqa: E402


@pytest.fixture(autouse=True)
def _log_dir_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep log files written by the tools out of the user's home directory."""

    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv("MIDI_PARSER_LOG_DIR", str(log_dir))
    monkeypatch.delenv("MIDI_PARSER_LOG_FILE", raising=False)

    yield

    logging_config._reset_for_tests()
