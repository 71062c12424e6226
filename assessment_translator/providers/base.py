"""
Provider Adapter Base

Every translation backend exposes the same batch contract:
``translate_batch(texts, target_lang) -> texts'`` with the output aligned
position by position with the input. Subclasses only describe how one call
is shaped and how its response is read; demo mode, empty-string handling,
error placeholders and response alignment live here.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from assessment_translator.logger import get_logger
from assessment_translator.providers.exceptions import BatchTranslationError
from assessment_translator.providers.http import describe_http_error, get_httpx_timeout

logger = get_logger(__name__)


def demo_placeholder(text: str, target_lang: str) -> str:
    """Deterministic stand-in used when no credentials are configured."""
    return f"[{target_lang.upper()}] {text}"


def error_placeholder(text: str) -> str:
    """Visible marker for a text whose batch could not be translated."""
    return f"[Translation Error: {text}]"


def _is_blank(text: Any) -> bool:
    return not isinstance(text, str) or not text.strip()


class TranslationProvider(ABC):
    """Base class for translation backends."""

    name = ""
    display_name = ""
    default_batch_size = 10

    def __init__(self, provider_config: Dict[str, Any], client: httpx.AsyncClient, source_language: str = "en"):
        self.config = provider_config
        self.client = client
        self.source_language = source_language
        self.batch_size = int(provider_config.get('batch_size') or self.default_batch_size)
        self.timeout = get_httpx_timeout(provider_config.get('timeout', 30))

    @abstractmethod
    def has_credentials(self) -> bool:
        """Whether real network calls can be made."""

    @abstractmethod
    async def _request_translations(self, texts: List[str], target_lang: str) -> List[Optional[str]]:
        """
        Send one batch of non-empty texts and return the provider's items.

        The returned list may be shorter than ``texts`` and may hold None for
        items without a translation. Raises BatchTranslationError on any
        transport, status or schema problem.
        """

    async def translate_batch(self, texts: List[str], target_lang: str) -> List[str]:
        """
        Translate one batch of texts into target_lang.

        Never raises for provider failures: demo mode returns tagged
        originals and a failed call returns error placeholders for the whole
        batch. ConfigurationError from endpoint discovery is not caught here.
        """
        if len(texts) > self.batch_size:
            raise ValueError(
                f"{self.display_name} accepts at most {self.batch_size} texts per batch, got {len(texts)}"
            )

        if not self.has_credentials():
            return [demo_placeholder(text, target_lang) for text in texts]

        positions = [index for index, text in enumerate(texts) if not _is_blank(text)]
        if not positions:
            return list(texts)

        to_send = [texts[index] for index in positions]
        try:
            translated = await self._request_translations(to_send, target_lang)
        except BatchTranslationError as e:
            logger.warning(f"Batch translation failed for {len(texts)} texts to {target_lang}: {e}")
            return [error_placeholder(text) for text in texts]

        if len(translated) < len(to_send):
            logger.warning(
                f"{self.display_name} returned {len(translated)} of {len(to_send)} translations for {target_lang}; "
                f"keeping originals for the rest"
            )

        result = list(texts)
        for slot, index in enumerate(positions):
            value = translated[slot] if slot < len(translated) else None
            result[index] = value if isinstance(value, str) and value else texts[index]
        return result

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Any:
        """POST a JSON payload and return the decoded body."""
        try:
            response = await self.client.post(url, json=payload, headers=headers, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise BatchTranslationError(f"{self.display_name} request timed out") from e
        except httpx.HTTPError as e:
            # Exception text can carry the request URL (and with it an API key)
            raise BatchTranslationError(f"{self.display_name} request failed: {e.__class__.__name__}") from e

        if not response.is_success:
            raise BatchTranslationError(
                describe_http_error(response, self.display_name),
                details={"status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise BatchTranslationError(f"{self.display_name} returned a body that is not JSON") from e
