"""
Google Cloud Translation (v2) adapter.
"""

from typing import Any, Dict, List, Optional

import httpx

from assessment_translator.config import is_configured_secret
from assessment_translator.logger import get_logger
from assessment_translator.providers.base import TranslationProvider
from assessment_translator.providers.exceptions import BatchTranslationError

logger = get_logger(__name__)

DEFAULT_API_URL = "https://translation.googleapis.com/language/translate/v2"


class GoogleTranslateProvider(TranslationProvider):
    """Translates batches of up to 50 strings per request."""

    name = "google"
    display_name = "Google Translate"
    default_batch_size = 50

    def __init__(self, provider_config: Dict[str, Any], client: httpx.AsyncClient, source_language: str = "en"):
        super().__init__(provider_config, client, source_language)
        self.api_key = provider_config.get('api_key', '')
        self.api_url = provider_config.get('api_url') or DEFAULT_API_URL

    def has_credentials(self) -> bool:
        return is_configured_secret(self.api_key)

    async def _request_translations(self, texts: List[str], target_lang: str) -> List[Optional[str]]:
        body = {
            "q": texts,
            "target": target_lang,
            "source": self.source_language,
            "format": "text",
        }

        logger.debug(f"Calling Google Translate: {len(texts)} texts to {target_lang}")
        result = await self._post_json(self.api_url, body, params={"key": self.api_key})

        data = result.get("data") if isinstance(result, dict) else None
        translations = data.get("translations") if isinstance(data, dict) else None
        if not isinstance(translations, list):
            raise BatchTranslationError("Google Translate response has no data.translations list")

        return [
            item.get("translatedText") if isinstance(item, dict) else None
            for item in translations
        ]
