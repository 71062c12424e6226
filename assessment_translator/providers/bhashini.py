"""
Bhashini (ULCA pipeline) adapter.

Each batch first resolves the compute endpoint for its target language
(cached after the first call), then posts the texts to that endpoint.
"""

from typing import Any, Dict, List, Optional

import httpx

from assessment_translator.config import is_configured_secret
from assessment_translator.logger import get_logger
from assessment_translator.providers.base import TranslationProvider
from assessment_translator.providers.endpoint_cache import (
    DEFAULT_PIPELINE_ID,
    EndpointResolver,
    PipelineEndpointCache,
    build_pipeline_tasks,
)
from assessment_translator.providers.exceptions import BatchTranslationError, ConfigurationError

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://meity-auth.ulcacontrib.org/ulca/apis/v0"


class BhashiniProvider(TranslationProvider):
    """Translates batches of up to 10 strings per request."""

    name = "bhashini"
    display_name = "Bhashini"
    default_batch_size = 10

    def __init__(
        self,
        provider_config: Dict[str, Any],
        client: httpx.AsyncClient,
        endpoint_cache: PipelineEndpointCache,
        source_language: str = "en",
    ):
        super().__init__(provider_config, client, source_language)
        self.user_id = provider_config.get('user_id', '')
        self.ulca_api_key = provider_config.get('ulca_api_key', '')
        self.resolver = EndpointResolver(
            client=client,
            cache=endpoint_cache,
            base_url=provider_config.get('base_url') or DEFAULT_BASE_URL,
            headers=self._auth_headers(),
            pipeline_id=provider_config.get('pipeline_id') or DEFAULT_PIPELINE_ID,
            source_language=source_language,
            timeout=self.timeout,
        )

    def has_credentials(self) -> bool:
        return is_configured_secret(self.user_id) and is_configured_secret(self.ulca_api_key)

    def _auth_headers(self) -> Dict[str, str]:
        return {
            "userID": self.user_id,
            "ulcaApiKey": self.ulca_api_key,
        }

    async def _request_translations(self, texts: List[str], target_lang: str) -> List[Optional[str]]:
        callback_url = await self.resolver.resolve_endpoint(target_lang)

        body = {
            "pipelineTasks": build_pipeline_tasks(self.source_language, target_lang),
            "inputData": {
                "input": [{"source": text} for text in texts],
            },
        }

        logger.debug(f"Calling Bhashini pipeline: {len(texts)} texts to {target_lang}")
        result = await self._post_json(callback_url, body, headers=self._auth_headers())
        return [
            item.get("target") if isinstance(item, dict) else None
            for item in self._extract_output(result, target_lang)
        ]

    @staticmethod
    def _extract_output(result: Any, target_lang: str) -> list:
        """Read ``pipelineResponse[0].output``, the only accepted response shape."""
        if not isinstance(result, dict):
            raise BatchTranslationError("Bhashini response is not a JSON object")

        pipeline_response = result.get("pipelineResponse")
        if pipeline_response is None and "output" in result:
            # A bare ``output`` list means the resolved URL is not a pipeline compute endpoint
            raise ConfigurationError(
                f"Bhashini endpoint for {target_lang} answered without pipelineResponse",
                details={"target_language": target_lang},
            )

        if not isinstance(pipeline_response, list) or not pipeline_response or not isinstance(pipeline_response[0], dict):
            raise BatchTranslationError("Bhashini response has no pipelineResponse entry")

        output = pipeline_response[0].get("output")
        if not isinstance(output, list):
            raise BatchTranslationError("Bhashini response has no output list")
        return output
