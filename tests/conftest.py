import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_home_config(tmp_path, monkeypatch):
    """Point the model configuration file at a per-test temporary path.

    Tests must never read or overwrite the user's real ``~/.cmsplit``.
    """
    config_path = Path(tmp_path) / ".cmsplit"
    monkeypatch.setattr("commit_split.config.loader._get_config_path", lambda: config_path)
    yield config_path


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Drop handlers the CLI adds via ``logging.basicConfig(force=True)``.

    Those handlers write to the streams of a finished ``CliRunner`` call,
    which are closed by the time later tests log.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
