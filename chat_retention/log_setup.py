"""Логирование: INFO в stdout, предупреждения и ошибки в stderr, всё вместе в logs/retention.log."""
import logging
import sys

from chat_retention.config import LOG_DIR

LOG_FMT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


class _BelowWarning(logging.Filter):
    def filter(self, record):
        return record.levelno < logging.WARNING


def setup_logging(level=logging.INFO, log_file=True):
    global _configured
    if _configured:
        return
    _configured = True

    formatter = logging.Formatter(LOG_FMT)
    root = logging.getLogger()
    root.setLevel(level)

    out = logging.StreamHandler(sys.stdout)
    out.setFormatter(formatter)
    out.addFilter(_BelowWarning())
    root.addHandler(out)

    err = logging.StreamHandler(sys.stderr)
    err.setFormatter(formatter)
    err.setLevel(logging.WARNING)
    root.addHandler(err)

    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    if not log_file:
        return
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(LOG_DIR / "retention.log", encoding="utf-8")
        fh.setFormatter(formatter)
        fh.setLevel(logging.DEBUG)
        root.addHandler(fh)
    except OSError as e:
        logging.getLogger(__name__).warning("Файл лога недоступен: %s", e)
