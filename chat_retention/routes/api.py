"""REST API: здоровье сервиса, текущие настройки хранения и предпросмотр очистки."""
import logging

from flask import Blueprint, current_app, jsonify

from chat_retention.services.cleanup import RetentionSetupError, run_retention_cleanup

logger = logging.getLogger(__name__)
api_bp = Blueprint("api", __name__)


def _settings():
    return current_app.config["RETENTION_SETTINGS"]


@api_bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@api_bp.route("/retention/config")
def retention_config():
    return jsonify(_settings().as_dict())


@api_bp.route("/retention/preview")
def retention_preview():
    """
    Сколько постов и вложений было бы удалено запуском прямо сейчас.
    Ничего не меняет ни в БД, ни на диске.
    """
    try:
        report = run_retention_cleanup(_settings(), dry_run=True)
    except RetentionSetupError as e:
        logger.error("[api] Предпросмотр недоступен: %s", e)
        return jsonify({
            "error": str(e),
            "recommendation": "Проверьте DATABASE_URL и STORAGE_PATH."
        }), 503
    return jsonify(report.as_dict())
