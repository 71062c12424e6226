"""
Provider selection.

Maps the configured provider name onto an adapter instance. Missing
credentials are a supported state (demo mode) and are only reported, never
rejected.
"""

from typing import Any, Dict, Optional

import httpx

from assessment_translator.config import BUILTIN_PROVIDERS
from assessment_translator.logger import get_logger
from assessment_translator.providers.base import TranslationProvider
from assessment_translator.providers.bhashini import BhashiniProvider
from assessment_translator.providers.endpoint_cache import PipelineEndpointCache
from assessment_translator.providers.exceptions import ConfigurationError
from assessment_translator.providers.google import GoogleTranslateProvider

logger = get_logger(__name__)


def resolve_provider_name(config: Dict[str, Any], provider_override: Optional[str] = None) -> str:
    """
    Pick the provider to use and make sure it is known.

    Raises:
        ConfigurationError: If the provider is not one of the built-in providers.
    """
    provider = provider_override if provider_override else config.get('translation_provider', 'google')
    provider = str(provider).strip().lower()

    if provider not in BUILTIN_PROVIDERS:
        raise ConfigurationError(
            f"Unsupported translation provider '{provider}'",
            details={"provider": provider, "supported": BUILTIN_PROVIDERS},
        )
    return provider


def create_provider(
    config: Dict[str, Any],
    client: httpx.AsyncClient,
    endpoint_cache: PipelineEndpointCache,
    provider_override: Optional[str] = None,
) -> TranslationProvider:
    """Build the adapter for the configured (or overridden) provider."""
    provider = resolve_provider_name(config, provider_override)
    provider_config = config.get(provider, {})
    source_language = config.get('translation', {}).get('source_language', 'en')

    if provider == 'bhashini':
        adapter = BhashiniProvider(provider_config, client, endpoint_cache, source_language=source_language)
    else:
        adapter = GoogleTranslateProvider(provider_config, client, source_language=source_language)

    if adapter.has_credentials():
        logger.info(f"Initialized {adapter.display_name} provider (batch size {adapter.batch_size})")
    else:
        logger.warning(f"{adapter.display_name} credentials not configured; running in demo mode")
    return adapter
