import logging

import pytest
from pydantic import ValidationError

from taskqueue.config import QueueSettings


def test_defaults(monkeypatch):
    monkeypatch.delenv("TASKQUEUE_CONCURRENCY_LIMIT", raising=False)
    monkeypatch.delenv("TASKQUEUE_LOG_LEVEL", raising=False)
    settings = QueueSettings(_env_file=None)
    assert settings.concurrency_limit == 2
    assert settings.log_level == "INFO"
    assert settings.log_file is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TASKQUEUE_CONCURRENCY_LIMIT", "5")
    monkeypatch.setenv("TASKQUEUE_LOG_LEVEL", "debug")
    settings = QueueSettings(_env_file=None)
    assert settings.concurrency_limit == 5
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("limit", [0, -3])
def test_rejects_non_positive_limit(limit):
    with pytest.raises(ValidationError):
        QueueSettings(_env_file=None, concurrency_limit=limit)


def test_configure_logging_creates_log_directory(tmp_path):
    log_file = tmp_path / "logs" / "taskqueue.log"
    settings = QueueSettings(_env_file=None, log_file=str(log_file))
    root = logging.getLogger()
    before = list(root.handlers)
    try:
        settings.configure_logging()
        assert log_file.parent.is_dir()
    finally:
        for handler in root.handlers:
            if handler not in before:
                root.removeHandler(handler)
                handler.close()
