"""Конфигурация задания очистки из окружения (.env).
Пути нормализованы так же, как в основном приложении:
- относительные пути из .env разрешаются относительно BASE_DIR (корень проекта);
- все пути приводятся к абсолютным через resolve().
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

MS_PER_DAY = 24 * 60 * 60 * 1000

# Значения EXPUNGE_GRACE_DAYS, отключающие окончательное удаление
NEVER = ("never", "none", "off", "")


def _resolve_path(env_value: str, default: Path) -> Path:
    """Абсолютный путь: если env_value относительный — разрешаем от BASE_DIR."""
    p = Path(env_value) if env_value else default
    if not p.is_absolute():
        p = BASE_DIR / p
    return p.resolve()


def parse_grace_days(value) -> Optional[int]:
    """Срок до окончательного удаления в днях; None — никогда не удалять."""
    if value is None:
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    text = str(value).strip().lower()
    if text in NEVER:
        return None
    days = int(text)
    return days if days >= 0 else None


def _non_negative_int(name: str, default: str) -> int:
    value = int(os.getenv(name, default).strip() or default)
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


# Paths
DATA_DIR = (BASE_DIR / "data").resolve()
STORAGE_PATH = _resolve_path(os.getenv("STORAGE_PATH", "").strip(), BASE_DIR / "storage")
LOG_DIR = _resolve_path(os.getenv("LOG_DIR", "").strip(), BASE_DIR / "logs")

# Database (URI с прямыми слэшами для работы на Win и Linux)
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{(DATA_DIR / 'chat.db').as_posix()}")

# Retention
RETENTION_DAYS = _non_negative_int("RETENTION_DAYS", "90")
POSTS_LIMIT = _non_negative_int("POSTS_LIMIT", "1000")
EXPUNGE_GRACE_DAYS = parse_grace_days(os.getenv("EXPUNGE_GRACE_DAYS", "7"))


@dataclass(frozen=True)
class RetentionSettings:
    database_url: str
    storage_path: Path
    retention_days: int
    posts_limit: int
    expunge_grace_days: Optional[int]

    @property
    def expunge_enabled(self) -> bool:
        return self.expunge_grace_days is not None

    def as_dict(self) -> dict:
        return {
            "storage_path": str(self.storage_path),
            "retention_days": self.retention_days,
            "posts_limit": self.posts_limit,
            "expunge_grace_days": self.expunge_grace_days,
            "expunge_enabled": self.expunge_enabled,
        }


def get_settings() -> RetentionSettings:
    """Настройки из переменных модуля (для cron-скрипта и админки)."""
    return RetentionSettings(
        database_url=DATABASE_URL,
        storage_path=STORAGE_PATH,
        retention_days=RETENTION_DAYS,
        posts_limit=POSTS_LIMIT,
        expunge_grace_days=EXPUNGE_GRACE_DAYS,
    )
