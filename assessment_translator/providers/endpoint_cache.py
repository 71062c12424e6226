"""
Pipeline endpoint discovery for the Bhashini (ULCA) service.

Bhashini does not expose a fixed translation URL: a discovery call to
``/model/getModelsPipeline`` returns the callback URL serving a language
pair. The resolved URL is cached per target language for the lifetime of the
session that owns the cache.

Known race: two tasks resolving the same uncached language at the same time
each issue a discovery call and the last one to finish wins the cache slot.
Both URLs serve the same language pair, so nothing is locked.
"""

from typing import Dict, Optional

import httpx

from assessment_translator.logger import get_logger
from assessment_translator.providers.exceptions import ConfigurationError

logger = get_logger(__name__)

DEFAULT_PIPELINE_ID = "64392f96daac500b55c543cd"
TASK_TYPE = "translation"


class PipelineEndpointCache:
    """Session-scoped mapping of ``<task>_<lang>`` keys to callback URLs."""

    def __init__(self):
        self._endpoints: Dict[str, str] = {}

    @staticmethod
    def cache_key(target_lang: str, task_type: str = TASK_TYPE) -> str:
        return f"{task_type}_{target_lang}"

    def get(self, key: str) -> Optional[str]:
        return self._endpoints.get(key)

    def set(self, key: str, endpoint: str) -> None:
        self._endpoints[key] = endpoint

    def clear(self) -> None:
        """Drop every cached endpoint (session reset)."""
        if self._endpoints:
            logger.info(f"Clearing {len(self._endpoints)} cached pipeline endpoints")
        self._endpoints.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._endpoints

    def __len__(self) -> int:
        return len(self._endpoints)


def build_pipeline_tasks(source_language: str, target_language: str) -> list:
    """The ``pipelineTasks`` block shared by discovery and compute calls."""
    return [
        {
            "taskType": TASK_TYPE,
            "config": {
                "language": {
                    "sourceLanguage": source_language,
                    "targetLanguage": target_language,
                },
            },
        }
    ]


class EndpointResolver:
    """Resolves and caches the compute endpoint for each target language."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: PipelineEndpointCache,
        base_url: str,
        headers: Dict[str, str],
        pipeline_id: str = DEFAULT_PIPELINE_ID,
        source_language: str = "en",
        timeout: Optional[httpx.Timeout] = None,
    ):
        self.client = client
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.headers = headers
        self.pipeline_id = pipeline_id
        self.source_language = source_language
        self.timeout = timeout

    async def resolve_endpoint(self, target_lang: str) -> str:
        """
        Return the callback URL for target_lang, discovering it on first use.

        Raises:
            ConfigurationError: discovery returned a non-success status, a
                non-JSON body, or no ``pipelineInferenceAPIEndPoint.callbackUrl``.
        """
        key = PipelineEndpointCache.cache_key(target_lang)
        cached = self.cache.get(key)
        if cached:
            return cached

        body = {
            "pipelineTasks": build_pipeline_tasks(self.source_language, target_lang),
            "pipelineRequestConfig": {
                "pipelineId": self.pipeline_id,
            },
        }

        logger.debug(f"Resolving Bhashini pipeline endpoint for {self.source_language}->{target_lang}")
        try:
            response = await self.client.post(
                f"{self.base_url}/model/getModelsPipeline",
                json=body,
                headers=self.headers,
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise ConfigurationError(
                f"Pipeline discovery for {target_lang} failed: {e.__class__.__name__}",
                details={"target_language": target_lang},
            ) from e

        if not response.is_success:
            raise ConfigurationError(
                f"Pipeline discovery for {target_lang} failed: {response.status_code} {response.reason_phrase}",
                details={"target_language": target_lang, "status_code": response.status_code},
            )

        try:
            result = response.json()
        except ValueError as e:
            raise ConfigurationError(
                f"Pipeline discovery for {target_lang} returned a body that is not JSON",
                details={"target_language": target_lang},
            ) from e

        endpoint = result.get("pipelineInferenceAPIEndPoint") if isinstance(result, dict) else None
        callback_url = endpoint.get("callbackUrl") if isinstance(endpoint, dict) else None
        if not isinstance(callback_url, str) or not callback_url:
            raise ConfigurationError(
                f"No inference endpoint received for {target_lang}",
                details={"target_language": target_lang},
            )

        self.cache.set(key, callback_url)
        logger.info(f"Cached Bhashini endpoint for {target_lang}")
        return callback_url
