"""Окончательное удаление: файлы вложений, записи FileInfo и посты после срока ожидания."""
import logging
from pathlib import Path
from typing import NamedTuple, Optional

from chat_retention.config import MS_PER_DAY
from chat_retention.services.pruner import remove_file

logger = logging.getLogger(__name__)

PATH_FIELDS = ("Path", "ThumbnailPath", "PreviewPath")

# Вложения, удалённые сами или через пост; вложения закреплённых постов не трогаем
_EXPIRED_FILEINFO_SQL = """
    SELECT f.Id, f.Path, f.ThumbnailPath, f.PreviewPath
    FROM FileInfo f
    LEFT JOIN Posts p ON p.Id = f.PostId
    WHERE ((f.DeleteAt != 0 AND f.DeleteAt <= :threshold)
           OR (p.DeleteAt != 0 AND p.DeleteAt <= :threshold))
      AND (p.Id IS NULL OR p.IsPinned = 0)
"""

_EXPIRED_POSTS_WHERE = "DeleteAt != 0 AND DeleteAt <= :threshold AND IsPinned = 0"


class ExpungeResult(NamedTuple):
    file_infos: int = 0
    files: int = 0
    file_errors: int = 0
    posts: int = 0


class ExpungeCoordinator:
    """Сначала файлы, потом строка FileInfo: строка живёт, пока жив хотя бы один её файл."""

    def __init__(self, conn, storage_root: Path, now: int, grace_days: Optional[int]):
        self.conn = conn
        self.storage_root = Path(storage_root)
        self.now = now
        self.grace_days = grace_days

    @property
    def enabled(self) -> bool:
        return self.grace_days is not None

    @property
    def threshold(self) -> int:
        return self.now - self.grace_days * MS_PER_DAY

    def count_candidates(self):
        """(вложения, посты), которые были бы удалены сейчас."""
        if not self.enabled:
            return 0, 0
        params = {"threshold": self.threshold}
        file_infos = self.conn.execute(
            f"SELECT COUNT(*) FROM ({_EXPIRED_FILEINFO_SQL})", params
        ).fetchone()[0]
        posts = self.conn.execute(
            f"SELECT COUNT(*) FROM Posts WHERE {_EXPIRED_POSTS_WHERE}", params
        ).fetchone()[0]
        return file_infos, posts

    def _remove_files(self, row):
        """(удалено файлов, все ли пути чисты)."""
        deleted = 0
        clean = True
        for field in PATH_FIELDS:
            rel = row[field]
            if not rel:
                continue
            if remove_file(self.storage_root, rel):
                deleted += 1
            else:
                clean = False
        return deleted, clean

    def expunge(self) -> ExpungeResult:
        if not self.enabled:
            logger.info("[expunge] Окончательное удаление отключено")
            return ExpungeResult()

        params = {"threshold": self.threshold}
        rows = self.conn.execute(_EXPIRED_FILEINFO_SQL, params).fetchall()
        file_infos = files = errors = 0
        for row in rows:
            deleted, clean = self._remove_files(row)
            files += deleted
            if not clean:
                errors += 1
                logger.error("[expunge] FileInfo %s оставлен до следующего запуска: не все файлы удалены", row["Id"])
                continue
            self.conn.execute("DELETE FROM FileInfo WHERE Id = ?", (row["Id"],))
            file_infos += 1
        logger.info("[expunge] Удалено вложений: %s (файлов: %s, ошибок: %s)", file_infos, files, errors)

        posts = self._delete_posts(params)
        logger.info("[expunge] Удалено постов: %s", posts)
        pinned = self.count_pinned_kept()
        if pinned:
            logger.info("[expunge] Закреплённых удалённых постов оставлено: %s", pinned)
        return ExpungeResult(file_infos, files, errors, posts)

    def count_pinned_kept(self) -> int:
        """Закреплённые посты, удалённые приложением: задание их не трогает вместе с вложениями."""
        if not self.enabled:
            return 0
        row = self.conn.execute(
            "SELECT COUNT(*) FROM Posts WHERE DeleteAt != 0 AND DeleteAt <= :threshold AND IsPinned != 0",
            {"threshold": self.threshold},
        ).fetchone()
        return row[0]

    def _delete_posts(self, params) -> int:
        cursor = self.conn.execute(f"DELETE FROM Posts WHERE {_EXPIRED_POSTS_WHERE}", params)
        return cursor.rowcount
