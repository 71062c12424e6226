import copy
import json
import os
from pathlib import Path
from typing import Dict, Any, Optional

from assessment_translator.logger import get_logger

logger = get_logger(__name__)

# Provider configuration constants
BUILTIN_PROVIDERS = ["google", "bhashini"]

BUILTIN_PROVIDER_DISPLAY_NAMES = {
    "google": "Google Translate",
    "bhashini": "Bhashini",
}

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"

# Columns of an assessment sheet that carry learner-facing text
DEFAULT_TRANSLATABLE_COLUMNS = [
    "question",
    "option_a_content",
    "option_b_content",
    "option_c_content",
    "option_d_content",
    "correct_feedback",
    "incorrect_feedback",
]

# Get base directory (project root)
BASE_DIR = Path(__file__).parent.parent
CONFIG_DIR = BASE_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "config.json"

# Default configuration template
DEFAULT_CONFIG = {
    "translation_provider": "google",
    "google": {
        "api_key": "",
        "api_url": "https://translation.googleapis.com/language/translate/v2",
        "batch_size": 50,
        "timeout": 30,
    },
    "bhashini": {
        "user_id": "",
        "ulca_api_key": "",
        "base_url": "https://meity-auth.ulcacontrib.org/ulca/apis/v0",
        "pipeline_id": "64392f96daac500b55c543cd",
        "batch_size": 10,
        "timeout": 30,
    },
    "translation": {
        "source_language": "en",
        "batch_delay": 0.1,  # Seconds between consecutive batches of one sheet
        "translatable_columns": DEFAULT_TRANSLATABLE_COLUMNS,
    },
    "log_mode": "off",
}

# Environment variable -> (section, key); section None means top level
ENV_OVERRIDES = {
    "TRANSLATION_PROVIDER": (None, "translation_provider"),
    "GOOGLE_TRANSLATE_API_KEY": ("google", "api_key"),
    "BHASHINI_USER_ID": ("bhashini", "user_id"),
    "BHASHINI_ULCA_API_KEY": ("bhashini", "ulca_api_key"),
    "BHASHINI_BASE_URL": ("bhashini", "base_url"),
    "LOG_MODE": (None, "log_mode"),
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        if section is None:
            config[key] = value
        else:
            config.setdefault(section, {})[key] = value
        logger.debug(f"Configuration value {section or ''}.{key} taken from {env_name}")
    return config


def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the configuration.

    Defaults are overlaid with the JSON config file (if present) and then with
    environment variables. Missing credentials are not an error: providers
    fall back to demo mode.
    """
    path = Path(config_file) if config_file else CONFIG_FILE
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
            if isinstance(file_config, dict):
                config = merge_config(config, file_config)
                logger.debug(f"Configuration loaded from {path}")
            else:
                logger.error(f"Config file {path} does not contain a JSON object, using defaults")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config file {path}: {e}")
            logger.warning("Using default configuration")
        except OSError as e:
            logger.error(f"Failed to read config file {path}: {e}")
            logger.warning("Using default configuration")

    return _apply_env_overrides(config)


def save_config(config: Dict[str, Any], config_file: Optional[Path] = None):
    """Save the configuration to the JSON config file."""
    path = Path(config_file) if config_file else CONFIG_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=4, ensure_ascii=False)
        logger.info(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save config to {path}: {e}")
        raise


def is_configured_secret(value: Any) -> bool:
    """True when a credential value is present and not the template placeholder."""
    return isinstance(value, str) and bool(value.strip()) and value != PLACEHOLDER_API_KEY


def mask_secret(value: Any) -> str:
    """Mask a credential for display, keeping the last four characters."""
    if not is_configured_secret(value):
        return ""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def get_public_settings(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Settings that are safe to expose through the web API."""
    config = config or load_config()
    google = config.get("google", {})
    bhashini = config.get("bhashini", {})
    translation = config.get("translation", {})

    return {
        "translation_provider": config.get("translation_provider", "google"),
        "source_language": translation.get("source_language", "en"),
        "batch_delay": translation.get("batch_delay", 0.1),
        "translatable_columns": translation.get("translatable_columns", DEFAULT_TRANSLATABLE_COLUMNS),
        "providers": {
            "google": {
                "display_name": BUILTIN_PROVIDER_DISPLAY_NAMES["google"],
                "api_url": google.get("api_url", ""),
                "api_key": mask_secret(google.get("api_key")),
                "has_credentials": is_configured_secret(google.get("api_key")),
                "batch_size": google.get("batch_size", 50),
            },
            "bhashini": {
                "display_name": BUILTIN_PROVIDER_DISPLAY_NAMES["bhashini"],
                "base_url": bhashini.get("base_url", ""),
                "user_id": mask_secret(bhashini.get("user_id")),
                "has_credentials": (
                    is_configured_secret(bhashini.get("user_id"))
                    and is_configured_secret(bhashini.get("ulca_api_key"))
                ),
                "batch_size": bhashini.get("batch_size", 10),
            },
        },
        "log_mode": config.get("log_mode", "off"),
    }
