"""Удаление файла вложения и опустевших каталогов над ним."""
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def resolve_under_root(root: Path, stored: str) -> Optional[Path]:
    """
    Абсолютный путь файла из БД. Пути в БД относительные (от корня хранилища),
    обратные слэши приводятся к прямым. None — путь выходит за пределы корня.
    """
    normalized = stored.replace("\\", "/").strip().lstrip("/")
    if not normalized:
        return None
    root = Path(os.path.normpath(os.path.abspath(root)))
    target = Path(os.path.normpath(root / normalized))
    if target == root or root not in target.parents:
        return None
    return target


def remove_file(root: Path, relative_path: str) -> bool:
    """
    Удаляет root/relative_path и пустые родительские каталоги (сам root не трогаем).
    True — файла больше нет (удалён сейчас или отсутствовал), False — удалить не удалось.
    """
    target = resolve_under_root(root, relative_path)
    if target is None:
        logger.error("[pruner] Путь вне хранилища, пропускаем: %r", relative_path)
        return False
    if not os.path.lexists(target):
        return True
    try:
        target.unlink()
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.error("[pruner] Не удалось удалить файл %s: %s", target, e)
        return False
    logger.info("[pruner] Удалён файл %s", target)
    prune_empty_dirs(root, target.parent)
    return True


def prune_empty_dirs(root: Path, start: Path) -> int:
    """Поднимается от start к root, удаляя пустые каталоги. Возвращает их число."""
    root = Path(os.path.normpath(os.path.abspath(root)))
    current = Path(os.path.normpath(os.path.abspath(start)))
    removed = 0
    while current != root and root in current.parents:
        try:
            if any(current.iterdir()):
                break
            current.rmdir()
        except OSError as e:
            logger.warning("[pruner] Не удалось удалить каталог %s: %s", current, e)
            break
        logger.info("[pruner] Удалён пустой каталог %s", current)
        removed += 1
        current = current.parent
    return removed
