"""Очистка по срокам хранения: мягкое удаление постов, затем окончательное удаление после срока ожидания."""
import logging
import sqlite3
import time
from typing import Optional

from chat_retention.config import RetentionSettings, get_settings
from chat_retention.database import check_schema, get_connection, get_db_path
from chat_retention.services.expunge import ExpungeCoordinator
from chat_retention.services.policy import RetentionPolicy
from chat_retention.services.report import RunReport

logger = logging.getLogger(__name__)


class RetentionSetupError(RuntimeError):
    """Запуск невозможен: нет хранилища, БД или нужных таблиц. Ничего не изменено."""


def now_ms() -> int:
    return int(time.time() * 1000)


def check_setup(settings: RetentionSettings) -> None:
    """Хранилище, БД и схема проверяются до любых изменений."""
    if not settings.storage_path.is_dir():
        raise RetentionSetupError(f"Хранилище недоступно: {settings.storage_path}")
    try:
        get_db_path(settings.database_url)
    except ValueError as e:
        raise RetentionSetupError(str(e)) from e
    try:
        with get_connection(settings.database_url, must_exist=True) as conn:
            check_schema(conn)
    except sqlite3.Error as e:
        raise RetentionSetupError(f"БД недоступна ({settings.database_url}): {e}") from e


def run_retention_cleanup(
    settings: Optional[RetentionSettings] = None,
    now: Optional[int] = None,
    dry_run: bool = False,
) -> RunReport:
    """
    Один запуск в одной транзакции. Порядок: мягкое удаление, затем expunge.
    Исключение в любом проходе откатывает все изменения в БД; уже удалённые файлы
    остаются удалёнными (повторный запуск считает их отсутствие успехом).
    """
    settings = settings or get_settings()
    now = now_ms() if now is None else now
    check_setup(settings)

    report = RunReport(now=now, expunge_enabled=settings.expunge_enabled, dry_run=dry_run)
    with get_connection(settings.database_url, must_exist=True) as conn:
        policy = RetentionPolicy(conn, now, settings.retention_days, settings.posts_limit)
        coordinator = ExpungeCoordinator(conn, settings.storage_path, now, settings.expunge_grace_days)

        if dry_run:
            report.posts_soft_deleted = policy.count_candidates()
            report.file_infos_soft_deleted = policy.count_file_candidates()
            report.file_infos_expunged, report.posts_expunged = coordinator.count_candidates()
        else:
            soft = policy.soft_delete()
            report.posts_soft_deleted = soft.posts
            report.file_infos_soft_deleted = soft.file_infos

            expunged = coordinator.expunge()
            report.file_infos_expunged = expunged.file_infos
            report.files_deleted = expunged.files
            report.file_errors = expunged.file_errors
            report.posts_expunged = expunged.posts

    report.log(logger)
    return report
