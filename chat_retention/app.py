"""Flask application factory: read-only admin surface for the retention job."""
import logging
import os

from flask import Flask

from chat_retention.config import get_settings
from chat_retention.log_setup import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings=None):
    """Запуски очистки делает только cron; здесь только просмотр настроек и dry-run."""
    setup_logging()
    app = Flask(__name__)
    app.config["RETENTION_SETTINGS"] = settings or get_settings()

    from chat_retention.routes import register_routes
    register_routes(app)
    return app


if __name__ == "__main__":
    app = create_app()
    port = int(os.getenv("PORT", 5000))
    app.run(host="127.0.0.1", port=port, debug=False)
