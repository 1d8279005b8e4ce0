"""SQLite-хранилище чата: таблицы Posts и FileInfo."""
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from chat_retention.config import DATABASE_URL

# Колонки, которые задание читает и меняет
POSTS_COLUMNS = ("Id", "ChannelId", "CreateAt", "IsPinned", "DeleteAt")
FILEINFO_COLUMNS = ("Id", "PostId", "Path", "ThumbnailPath", "PreviewPath", "DeleteAt")


def get_db_path(url: Optional[str] = None) -> Path:
    """Путь к файлу БД. Поддерживается только sqlite:///; иначе ValueError."""
    url = url or DATABASE_URL
    if not url.startswith("sqlite:///"):
        scheme = url.split(":", 1)[0]
        raise ValueError(f"Неподдерживаемая схема DATABASE_URL: {scheme!r} (нужен sqlite:///путь)")
    path = url.replace("sqlite:///", "", 1)
    if not path:
        raise ValueError("В DATABASE_URL не указан путь к файлу БД")
    return Path(path)


@contextmanager
def get_connection(url: Optional[str] = None, must_exist: bool = False):
    """
    Соединение с одной транзакцией: commit при выходе, rollback при исключении.
    must_exist=True — не создавать пустую БД, а упасть, если файла нет.
    """
    path = get_db_path(url)
    if must_exist:
        conn = sqlite3.connect(f"file:{path.as_posix()}?mode=rw", uri=True)
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def check_schema(conn) -> None:
    """Проверка, что таблицы и колонки на месте (аналог подготовки запросов)."""
    conn.execute(f"SELECT {', '.join(POSTS_COLUMNS)} FROM Posts LIMIT 0")
    conn.execute(f"SELECT {', '.join(FILEINFO_COLUMNS)} FROM FileInfo LIMIT 0")


def init_db(url: Optional[str] = None):
    """Create tables: Posts, FileInfo (для разработки и тестов)."""
    with get_connection(url) as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS Posts (
                Id TEXT PRIMARY KEY,
                ChannelId TEXT NOT NULL,
                CreateAt INTEGER NOT NULL,
                IsPinned INTEGER NOT NULL DEFAULT 0,
                DeleteAt INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS FileInfo (
                Id TEXT PRIMARY KEY,
                PostId TEXT,
                Path TEXT,
                ThumbnailPath TEXT,
                PreviewPath TEXT,
                DeleteAt INTEGER NOT NULL DEFAULT 0
            );

            CREATE INDEX IF NOT EXISTS idx_posts_channel_create ON Posts(ChannelId, CreateAt);
            CREATE INDEX IF NOT EXISTS idx_posts_delete ON Posts(DeleteAt);
            CREATE INDEX IF NOT EXISTS idx_fileinfo_post ON FileInfo(PostId);
            CREATE INDEX IF NOT EXISTS idx_fileinfo_delete ON FileInfo(DeleteAt);
        """)
    return get_db_path(url)
