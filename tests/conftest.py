"""Pytest fixtures."""
import sqlite3
import sys
from pathlib import Path

import pytest

# Project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from chat_retention.config import MS_PER_DAY, RetentionSettings
from chat_retention.database import init_db

NOW = 1_700_000_000_000


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def storage(tmp_path):
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def db_url(tmp_path):
    url = f"sqlite:///{(tmp_path / 'chat.db').as_posix()}"
    init_db(url)
    return url


@pytest.fixture
def conn(db_url):
    c = sqlite3.connect(db_url.replace("sqlite:///", "", 1))
    c.row_factory = sqlite3.Row
    yield c
    c.close()


@pytest.fixture
def settings(db_url, storage):
    return RetentionSettings(
        database_url=db_url,
        storage_path=storage,
        retention_days=30,
        posts_limit=2,
        expunge_grace_days=7,
    )


@pytest.fixture
def client(settings):
    from chat_retention.app import create_app
    app = create_app(settings)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def days_ago(days, now=NOW):
    return now - days * MS_PER_DAY


def add_post(conn, post_id, channel="c1", create_at=None, pinned=False, delete_at=0):
    conn.execute(
        "INSERT INTO Posts (Id, ChannelId, CreateAt, IsPinned, DeleteAt) VALUES (?, ?, ?, ?, ?)",
        (post_id, channel, days_ago(60) if create_at is None else create_at, int(pinned), delete_at),
    )
    conn.commit()


def add_file(conn, file_id, post_id, path=None, thumb=None, preview=None, delete_at=0, storage=None):
    """Запись FileInfo; при storage создаёт и сами файлы."""
    if storage is not None:
        for rel in (path, thumb, preview):
            if rel:
                f = storage / rel
                f.parent.mkdir(parents=True, exist_ok=True)
                f.write_bytes(b"data")
    conn.execute(
        "INSERT INTO FileInfo (Id, PostId, Path, ThumbnailPath, PreviewPath, DeleteAt) VALUES (?, ?, ?, ?, ?, ?)",
        (file_id, post_id, path, thumb, preview, delete_at),
    )
    conn.commit()


def delete_at(conn, table, row_id):
    row = conn.execute(f"SELECT DeleteAt FROM {table} WHERE Id = ?", (row_id,)).fetchone()
    return None if row is None else row[0]
