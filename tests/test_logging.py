from __future__ import annotations

import json
import logging
from pathlib import Path

from todo_portal.config import Settings
from todo_portal.observability.logging import LOG_FILENAME, JsonFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("todo.tasks", logging.INFO, __file__, 1, "task.create", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_json_formatter_includes_extras() -> None:
    line = JsonFormatter().format(_record(category="tasks", event="task.create", task_id="t1"))
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["logger"] == "todo.tasks"
    assert payload["msg"] == "task.create"
    assert payload["event"] == "task.create"
    assert payload["task_id"] == "t1"
    assert payload["ts"].endswith("Z")
    assert "lineno" not in payload


def test_json_formatter_stringifies_unknown_values() -> None:
    payload = json.loads(JsonFormatter().format(_record(path=Path("/tmp/x"))))
    assert payload["path"] == "/tmp/x"


def test_setup_logging_writes_jsonl(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    settings = Settings(
        db_path=tmp_path / "todo.db",
        log_level="INFO",
        log_dir=tmp_path / "logs",
        log_to_file=True,
    )
    try:
        setup_logging(settings)
        logging.getLogger("todo.system").info("system.start", extra={"event": "system.start"})
        for h in root.handlers:
            h.flush()
        lines = (tmp_path / "logs" / LOG_FILENAME).read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["event"] == "system.start"
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("DB_PATH", "/tmp/tasks.db")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_TO_FILE", "off")

    settings = Settings.from_env()

    assert settings.db_path == Path("/tmp/tasks.db")
    assert settings.log_level == "DEBUG"
    assert settings.log_to_file is False
