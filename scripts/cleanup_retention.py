#!/usr/bin/env python3
"""Скрипт очистки сообщений по срокам хранения. Запуск из cron, например: 0 3 * * * cd /path/to/project && python scripts/cleanup_retention.py"""
import argparse
import logging
import os
import sqlite3
import sys

# Корень проекта
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chat_retention.log_setup import setup_logging
from chat_retention.services.cleanup import RetentionSetupError, run_retention_cleanup

logger = logging.getLogger("cleanup_retention")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Soft-delete and expunge chat posts by retention policy.")
    parser.add_argument("--dry-run", action="store_true", help="Only count candidates; change nothing.")
    args = parser.parse_args(argv)

    setup_logging()
    try:
        run_retention_cleanup(dry_run=args.dry_run)
    except RetentionSetupError as e:
        logger.error("Запуск прерван: %s", e)
        return 1
    except sqlite3.Error:
        logger.exception("Ошибка БД, транзакция откатана")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
