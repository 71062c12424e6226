"""
Providers Module

Translation backends (Google Translate, Bhashini) behind one batch contract.
"""

from assessment_translator.providers.exceptions import (
    TranslationError,
    ConfigurationError,
    BatchTranslationError,
    InputError,
)
from assessment_translator.providers.base import TranslationProvider, demo_placeholder, error_placeholder
from assessment_translator.providers.endpoint_cache import PipelineEndpointCache, EndpointResolver
from assessment_translator.providers.service import create_provider, resolve_provider_name

__all__ = [
    'TranslationError',
    'ConfigurationError',
    'BatchTranslationError',
    'InputError',
    'TranslationProvider',
    'demo_placeholder',
    'error_placeholder',
    'PipelineEndpointCache',
    'EndpointResolver',
    'create_provider',
    'resolve_provider_name',
]
