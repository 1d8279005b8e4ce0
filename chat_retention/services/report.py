"""Итоги одного запуска очистки."""
import logging
from dataclasses import asdict, dataclass


@dataclass
class RunReport:
    now: int
    expunge_enabled: bool
    dry_run: bool = False
    posts_soft_deleted: int = 0
    file_infos_soft_deleted: int = 0
    file_infos_expunged: int = 0
    files_deleted: int = 0
    file_errors: int = 0
    posts_expunged: int = 0

    def lines(self):
        prefix = "[dry-run] " if self.dry_run else ""
        out = [
            f"{prefix}Помечено удалёнными постов: {self.posts_soft_deleted}",
            f"{prefix}Помечено удалёнными вложений: {self.file_infos_soft_deleted}",
        ]
        if not self.expunge_enabled:
            out.append(f"{prefix}Окончательное удаление отключено")
            return out
        out.append(f"{prefix}Окончательно удалено вложений: {self.file_infos_expunged}")
        if not self.dry_run:
            out.append(f"Удалено файлов: {self.files_deleted}")
        out.append(f"{prefix}Окончательно удалено постов: {self.posts_expunged}")
        return out

    def log(self, logger: logging.Logger) -> None:
        for line in self.lines():
            logger.info("[cleanup] %s", line)
        if self.file_errors:
            logger.warning(
                "[cleanup] Вложений оставлено до следующего запуска: %s (не все файлы удалены)",
                self.file_errors,
            )

    def as_dict(self) -> dict:
        return asdict(self)
