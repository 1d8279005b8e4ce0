"""Мягкое удаление постов по сроку хранения с сохранением последних N в канале."""
import logging
from typing import NamedTuple

from chat_retention.config import MS_PER_DAY

logger = logging.getLogger(__name__)

# Живые незакреплённые посты, ранжированные внутри канала от новых к старым.
# При равном CreateAt порядок задаёт Id.
_CANDIDATES_SQL = """
    SELECT Id FROM (
        SELECT Id, CreateAt,
               ROW_NUMBER() OVER (
                   PARTITION BY ChannelId ORDER BY CreateAt DESC, Id DESC
               ) AS rank_in_channel
        FROM Posts
        WHERE DeleteAt = 0 AND IsPinned = 0
    )
    WHERE rank_in_channel > :posts_limit AND CreateAt < :cutoff
"""

_PROPAGATE_SQL = """
    UPDATE FileInfo
    SET DeleteAt = (SELECT p.DeleteAt FROM Posts p WHERE p.Id = FileInfo.PostId)
    WHERE DeleteAt = 0
      AND PostId IN (SELECT Id FROM Posts WHERE DeleteAt != 0)
"""


class SoftDeleteResult(NamedTuple):
    posts: int
    file_infos: int


class RetentionPolicy:
    """
    Пост удаляется, только если он старше срока хранения, не закреплён
    и не входит в posts_limit самых новых живых постов своего канала.
    """

    def __init__(self, conn, now: int, retention_days: int, posts_limit: int):
        self.conn = conn
        self.now = now
        self.retention_days = retention_days
        self.posts_limit = posts_limit

    @property
    def cutoff(self) -> int:
        return self.now - self.retention_days * MS_PER_DAY

    def _params(self) -> dict:
        return {"posts_limit": self.posts_limit, "cutoff": self.cutoff}

    def count_candidates(self) -> int:
        row = self.conn.execute(
            f"SELECT COUNT(*) FROM ({_CANDIDATES_SQL})", self._params()
        ).fetchone()
        return row[0]

    def count_file_candidates(self) -> int:
        """Живые вложения, которые получат DeleteAt: пост уже удалён или будет удалён сейчас."""
        row = self.conn.execute(
            f"""
            SELECT COUNT(*) FROM FileInfo
            WHERE DeleteAt = 0
              AND (PostId IN (SELECT Id FROM Posts WHERE DeleteAt != 0)
                   OR PostId IN ({_CANDIDATES_SQL}))
            """,
            self._params(),
        ).fetchone()
        return row[0]

    def soft_delete(self) -> SoftDeleteResult:
        params = self._params()
        params["now"] = self.now
        cursor = self.conn.execute(
            f"UPDATE Posts SET DeleteAt = :now WHERE Id IN ({_CANDIDATES_SQL})",
            params,
        )
        posts = cursor.rowcount
        logger.info("[policy] Помечено удалёнными постов: %s", posts)

        cursor = self.conn.execute(_PROPAGATE_SQL)
        file_infos = cursor.rowcount
        logger.info("[policy] Помечено удалёнными вложений: %s", file_infos)
        return SoftDeleteResult(posts, file_infos)
