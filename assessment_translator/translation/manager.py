"""
Translation Manager Module

Main TranslationManager class that coordinates the translation workflow:
- Validate the request before any network activity
- Fan out one task per target language, all running concurrently
- Translate each sheet of a language through the deduplicating batcher
- Reassemble translated rows and aggregate results by language and sheet

Provider failures never escape: a failed batch becomes error placeholders
for that batch, and a language whose endpoint cannot be resolved gets error
placeholders for all of its translatable fields. Other languages are
unaffected.
"""

import asyncio
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from assessment_translator.config import load_config
from assessment_translator.logger import get_logger
import assessment_translator.language_codes as lc
from assessment_translator.providers.base import TranslationProvider, error_placeholder
from assessment_translator.providers.endpoint_cache import PipelineEndpointCache
from assessment_translator.providers.exceptions import ConfigurationError, InputError
from assessment_translator.providers.http import get_httpx_timeout
from assessment_translator.providers.service import create_provider, resolve_provider_name

from assessment_translator.translation.batcher import build_lookup, collect_translatable_texts
from assessment_translator.translation.models import (
    Row,
    Sheet,
    TranslatedResult,
    Workbook,
    count_rows,
    single_sheet_workbook,
)
from assessment_translator.translation.progress import TranslationProgress
from assessment_translator.translation.reassembler import apply_lookup

logger = get_logger(__name__)

ProgressCallback = Callable[[TranslationProgress], None]


def validate_request(workbook: Workbook, target_langs: Optional[Iterable[str]], source_language: str = "en") -> List[str]:
    """
    Check that there is something to translate and somewhere to translate it to.

    Returns:
        Cleaned list of target language codes

    Raises:
        InputError: If the workbook has no rows or no target language is selected.
    """
    if not workbook or count_rows(workbook) == 0:
        raise InputError("Please upload a file with at least one data row")

    languages = lc.normalize_target_languages(target_langs or [], source_language)
    if not languages:
        raise InputError(
            "Please select at least one target language",
            details={"requested": list(target_langs or [])},
        )
    return languages


def failed_sheet(sheet: Sheet, translatable_columns: Optional[Iterable[str]]) -> Sheet:
    """Copy of sheet with every translatable value replaced by an error placeholder."""
    texts = collect_translatable_texts(sheet.rows, translatable_columns)
    lookup = {text: error_placeholder(text) for text in texts}
    return Sheet(
        name=sheet.name,
        headers=list(sheet.headers),
        rows=apply_lookup(sheet.rows, lookup, translatable_columns),
    )


class TranslationManager:
    """
    Translates workbooks into several target languages at once.

    The manager owns the pipeline endpoint cache for its session; reset()
    discards it. An httpx.AsyncClient may be injected; otherwise one is
    opened for each translate_workbook() call.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        provider_name: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        endpoint_cache: Optional[PipelineEndpointCache] = None,
    ):
        self.config = config if config is not None else load_config()
        self.provider_name = resolve_provider_name(self.config, provider_name)
        self.client = client
        self.endpoint_cache = endpoint_cache if endpoint_cache is not None else PipelineEndpointCache()

        translation_config = self.config.get('translation', {})
        self.source_language = translation_config.get('source_language', lc.SOURCE_LANGUAGE)
        self.batch_delay = float(translation_config.get('batch_delay', 0.1))

    def reset(self) -> None:
        """Forget session state (resolved endpoints)."""
        self.endpoint_cache.clear()

    async def translate_workbook(
        self,
        workbook: Workbook,
        target_langs: Iterable[str],
        translatable_columns: Optional[Iterable[str]] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Dict[str, TranslatedResult]:
        """
        Translate every sheet of workbook into every target language.

        Args:
            workbook: Ordered mapping of sheet name to Sheet
            target_langs: Target language codes
            translatable_columns: Allow-list of column names (case-insensitive);
                None translates every string field
            progress_callback: Optional callback for progress updates

        Returns:
            Mapping of language code to translated sheets, in the order the
            languages were requested

        Raises:
            InputError: Before any network call, if there is nothing to do.
        """
        languages = validate_request(workbook, target_langs, self.source_language)
        columns = list(translatable_columns) if translatable_columns is not None else None

        for lang in languages:
            if not lc.is_supported(lang, self.provider_name):
                logger.warning(f"Language '{lang}' is not in the {self.provider_name} catalogue; trying anyway")

        start_time = time.monotonic()
        logger.info(
            f"Translating {len(workbook)} sheet(s), {count_rows(workbook)} row(s) into "
            f"{len(languages)} language(s) with {self.provider_name}"
        )

        owns_client = self.client is None
        client = self.client if self.client is not None else httpx.AsyncClient()
        status = {"completed": 0}
        try:
            provider = create_provider(self.config, client, self.endpoint_cache, self.provider_name)
            outcomes = await asyncio.gather(
                *(
                    self._translate_language(provider, workbook, lang, columns, len(languages), status, progress_callback)
                    for lang in languages
                ),
                return_exceptions=True,
            )
        finally:
            if owns_client:
                await client.aclose()

        results: Dict[str, TranslatedResult] = {}
        for lang, outcome in zip(languages, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Translation task for {lang} ended with {outcome!r}; using error placeholders")
                results[lang] = {name: failed_sheet(sheet, columns) for name, sheet in workbook.items()}
            else:
                results[lang] = outcome

        logger.info(f"Translation finished for {len(results)} language(s) in {time.monotonic() - start_time:.2f}s")
        return results

    async def translate_rows(
        self,
        rows: List[Row],
        target_langs: Iterable[str],
        translatable_columns: Optional[Iterable[str]] = None,
        headers: Optional[List[str]] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> Dict[str, Sheet]:
        """Single-sheet variant: returns one translated Sheet per language."""
        workbook = single_sheet_workbook(rows, headers)
        results = await self.translate_workbook(workbook, target_langs, translatable_columns, progress_callback)
        return {lang: next(iter(sheets.values())) for lang, sheets in results.items()}

    async def _translate_language(
        self,
        provider: TranslationProvider,
        workbook: Workbook,
        lang: str,
        columns: Optional[List[str]],
        total_languages: int,
        status: Dict[str, int],
        progress_callback: Optional[ProgressCallback],
    ) -> TranslatedResult:
        """Translate all sheets for one language; sheets run one after another."""
        translated: TranslatedResult = {}
        try:
            for sheet_name, sheet in workbook.items():
                translated[sheet_name] = await self._translate_sheet(
                    provider, sheet, lang, columns, total_languages, status, progress_callback
                )
        except ConfigurationError as e:
            logger.warning(f"Translation to {lang} aborted: {e}")
            return self._fail_language(workbook, lang, columns, total_languages, status, progress_callback, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error while translating to {lang}: {e}")
            return self._fail_language(workbook, lang, columns, total_languages, status, progress_callback, str(e))

        status["completed"] += 1
        logger.info(f"Completed {lang} ({status['completed']}/{total_languages})")
        self._report(progress_callback, TranslationProgress(
            current_language=lang,
            current_language_name=lc.get_language_name(lang) or lang,
            total_languages=total_languages,
            completed_languages=status["completed"],
            phase="language_done",
        ))
        return translated

    async def _translate_sheet(
        self,
        provider: TranslationProvider,
        sheet: Sheet,
        lang: str,
        columns: Optional[List[str]],
        total_languages: int,
        status: Dict[str, int],
        progress_callback: Optional[ProgressCallback],
    ) -> Sheet:
        def on_batch(batch_number: int, total_batches: int, batch_size: int) -> None:
            self._report(progress_callback, TranslationProgress(
                current_language=lang,
                current_language_name=lc.get_language_name(lang) or lang,
                total_languages=total_languages,
                completed_languages=status["completed"],
                current_sheet=sheet.name,
                current_batch=batch_number,
                total_batches=total_batches,
                batch_texts_count=batch_size,
                phase="batch_done",
            ))

        lookup = await build_lookup(
            sheet.rows,
            columns,
            lang,
            provider,
            batch_delay=self.batch_delay,
            on_batch=on_batch,
        )
        return Sheet(
            name=sheet.name,
            headers=list(sheet.headers),
            rows=apply_lookup(sheet.rows, lookup, columns),
        )

    def _fail_language(
        self,
        workbook: Workbook,
        lang: str,
        columns: Optional[List[str]],
        total_languages: int,
        status: Dict[str, int],
        progress_callback: Optional[ProgressCallback],
        error: str,
    ) -> TranslatedResult:
        status["completed"] += 1
        self._report(progress_callback, TranslationProgress(
            current_language=lang,
            current_language_name=lc.get_language_name(lang) or lang,
            total_languages=total_languages,
            completed_languages=status["completed"],
            phase="failed",
            error=error,
        ))
        return {name: failed_sheet(sheet, columns) for name, sheet in workbook.items()}

    @staticmethod
    def _report(progress_callback: Optional[ProgressCallback], progress: TranslationProgress) -> None:
        if not progress_callback:
            return
        try:
            progress_callback(progress)
        except Exception as e:
            logger.error(f"Progress callback failed: {e}")


async def translate_workbook(
    workbook: Workbook,
    target_langs: Iterable[str],
    translatable_columns: Optional[Iterable[str]] = None,
    config: Optional[Dict[str, Any]] = None,
    provider_name: Optional[str] = None,
    endpoint_cache: Optional[PipelineEndpointCache] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> Dict[str, TranslatedResult]:
    """One-shot helper: build a manager, translate, close the HTTP client."""
    config = config if config is not None else load_config()
    provider_config = config.get(resolve_provider_name(config, provider_name), {})

    async with httpx.AsyncClient(timeout=get_httpx_timeout(provider_config.get('timeout', 30))) as client:
        manager = TranslationManager(config, provider_name, client=client, endpoint_cache=endpoint_cache)
        return await manager.translate_workbook(workbook, target_langs, translatable_columns, progress_callback)


def translate_workbook_sync(*args, **kwargs) -> Dict[str, TranslatedResult]:
    """Blocking wrapper for callers outside an event loop (e.g. worker threads)."""
    return asyncio.run(translate_workbook(*args, **kwargs))
