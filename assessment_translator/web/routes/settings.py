"""Settings API routes."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request

from assessment_translator.config import (
    BUILTIN_PROVIDERS,
    get_public_settings,
    merge_config,
    save_config,
)
import assessment_translator.language_codes as lc
from assessment_translator.logger import _clear_log_mode_cache, get_logger

settings_bp = Blueprint("settings", __name__)
logger = get_logger(__name__)

LOG_MODES = ("off", "info", "debug")


@settings_bp.get("/")
def get_settings():
    """Return the active configuration without credentials."""
    settings = get_public_settings(current_app.config["TRANSLATOR_CONFIG"])
    logger.debug("Settings retrieved")
    return jsonify(settings)


@settings_bp.put("/")
def update_settings():
    """Update, save and apply the configuration."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get("config"), dict):
        return jsonify({"error": "Request body must contain a config object"}), 400

    new_config = merge_config(current_app.config["TRANSLATOR_CONFIG"], data["config"])

    validation_error = validate_config(new_config)
    if validation_error:
        return jsonify({"error": validation_error}), 400

    try:
        save_config(new_config, current_app.config["TRANSLATOR_CONFIG_FILE"])
    except OSError:
        return jsonify({"error": "Failed to save settings"}), 500

    current_app.config["TRANSLATOR_CONFIG"] = new_config

    # New log mode applies to every existing logger
    _clear_log_mode_cache(new_config.get("log_mode", "off"))

    logger.info("Settings updated successfully")
    return jsonify({"message": "Settings updated successfully", "settings": get_public_settings(new_config)})


def validate_config(config_dict: Dict[str, Any]) -> Optional[str]:
    """Validate configuration structure and return error message if invalid."""
    provider = config_dict.get("translation_provider")
    if provider not in BUILTIN_PROVIDERS:
        return f"Unsupported translation provider '{provider}'"

    if config_dict.get("log_mode", "off") not in LOG_MODES:
        return f"log_mode must be one of {', '.join(LOG_MODES)}"

    for name in BUILTIN_PROVIDERS:
        provider_config = config_dict.get(name)
        if not isinstance(provider_config, dict):
            return f"{name} config must be an object"

        batch_size = provider_config.get("batch_size")
        if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size < 1:
            return f"{name} batch_size must be a positive integer"

        timeout = provider_config.get("timeout")
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            return f"{name} timeout must be a positive number"

    translation = config_dict.get("translation")
    if not isinstance(translation, dict):
        return "translation config must be an object"

    delay = translation.get("batch_delay")
    if not isinstance(delay, (int, float)) or isinstance(delay, bool) or delay < 0:
        return "translation batch_delay must be a non-negative number"

    columns = translation.get("translatable_columns")
    if columns is not None and (not isinstance(columns, list) or not all(isinstance(c, str) for c in columns)):
        return "translation translatable_columns must be a list of column names or null"

    return None


@settings_bp.get("/languages")
def get_languages():
    """Return the target language catalogue for a provider."""
    config = current_app.config["TRANSLATOR_CONFIG"]
    provider = request.args.get("provider") or config.get("translation_provider", "google")
    if provider not in BUILTIN_PROVIDERS:
        return jsonify({"error": f"Unsupported translation provider '{provider}'"}), 400

    return jsonify({
        "provider": provider,
        "source_language": lc.SOURCE_LANGUAGE,
        "languages": lc.get_supported_languages(provider),
    })
