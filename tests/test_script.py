"""Cron-скрипт: код выхода отражает, завершился ли запуск."""
import importlib.util
import sqlite3
from pathlib import Path

import pytest

from chat_retention.services import cleanup

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "cleanup_retention.py"


@pytest.fixture
def script(monkeypatch):
    module_spec = importlib.util.spec_from_file_location("cleanup_retention_script", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    monkeypatch.setattr(module, "setup_logging", lambda *a, **k: None)
    return module


def test_success_exit_code(script, monkeypatch, settings):
    calls = []

    def fake_run(dry_run=False):
        calls.append(dry_run)
        return cleanup.run_retention_cleanup(settings, dry_run=dry_run)

    monkeypatch.setattr(script, "run_retention_cleanup", fake_run)
    assert script.main([]) == 0
    assert script.main(["--dry-run"]) == 0
    assert calls == [False, True]


def test_setup_error_exit_code(script, monkeypatch):
    def fail(dry_run=False):
        raise cleanup.RetentionSetupError("Хранилище недоступно")

    monkeypatch.setattr(script, "run_retention_cleanup", fail)
    assert script.main([]) == 1


def test_database_error_exit_code(script, monkeypatch):
    def fail(dry_run=False):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(script, "run_retention_cleanup", fail)
    assert script.main([]) == 1
