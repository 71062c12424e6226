"""
Translation module - Core translation functionality

This module provides:
- TranslationManager: Fan-out of a workbook across target languages
- Deduplicating batcher and row reassembler
- Workbook data model and progress tracking dataclass
"""

from assessment_translator.translation.progress import TranslationProgress
from assessment_translator.translation.models import (
    Sheet,
    normalize_headers,
    workbook_from_dict,
    single_sheet_workbook,
    results_to_dict,
)
from assessment_translator.translation.batcher import (
    RateLimiter,
    build_lookup,
    chunk_texts,
    collect_translatable_texts,
)
from assessment_translator.translation.reassembler import apply_lookup, is_translatable_field
from assessment_translator.translation.manager import (
    TranslationManager,
    translate_workbook,
    translate_workbook_sync,
    validate_request,
)
