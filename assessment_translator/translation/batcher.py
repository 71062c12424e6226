"""
Translation Batching Module

Collects the distinct translatable strings of one sheet, splits them into
provider-sized batches and drives those batches one after another through a
provider adapter:
- Deduplication (each distinct string is sent once per language)
- Fixed-size chunking
- Sequential, paced batch loop
- Positional zip of originals and translations into a lookup
"""

import asyncio
import time
from typing import Callable, Dict, Iterable, List, Optional

from assessment_translator.logger import get_logger
from assessment_translator.providers.base import TranslationProvider
from assessment_translator.translation.models import Row
from assessment_translator.translation.reassembler import is_translatable_field, normalize_columns

logger = get_logger(__name__)

# Called after each batch with (batch_number, total_batches, batch_size)
BatchCallback = Callable[[int, int, int], None]


class RateLimiter:
    """Fixed pause before every call after the first."""

    def __init__(self, delay: float = 0.1):
        self.delay = max(0.0, float(delay or 0.0))
        self._calls = 0

    async def wait(self) -> None:
        if self._calls and self.delay:
            await asyncio.sleep(self.delay)
        self._calls += 1


def collect_translatable_texts(rows: List[Row], translatable_columns: Optional[Iterable[str]] = None) -> List[str]:
    """
    Distinct eligible strings of rows, in order of first occurrence.

    Examples:
        >>> collect_translatable_texts([{'q': 'Cat'}, {'q': 'Dog'}, {'q': 'Cat'}])
        ['Cat', 'Dog']
    """
    columns = normalize_columns(translatable_columns)
    texts: List[str] = []
    seen = set()

    for row in rows:
        for column, value in row.items():
            if is_translatable_field(column, value, columns) and value not in seen:
                seen.add(value)
                texts.append(value)

    return texts


def chunk_texts(texts: List[str], batch_size: int) -> List[List[str]]:
    """
    Split texts into contiguous batches of at most batch_size items.

    Examples:
        >>> chunk_texts(['a', 'b', 'c'], 2)
        [['a', 'b'], ['c']]
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    return [texts[i:i + batch_size] for i in range(0, len(texts), batch_size)]


async def translate_texts(
    texts: List[str],
    target_lang: str,
    provider: TranslationProvider,
    batch_delay: float = 0.1,
    on_batch: Optional[BatchCallback] = None,
) -> List[str]:
    """
    Translate distinct texts batch by batch.

    Batch N is only sent after batch N-1 has returned. The result is aligned
    with texts; positions a provider left out keep their original text.
    """
    chunks = chunk_texts(texts, provider.batch_size)
    limiter = RateLimiter(batch_delay if len(chunks) > 1 else 0.0)
    translated: List[str] = []

    for chunk_idx, chunk in enumerate(chunks):
        await limiter.wait()

        start = time.monotonic()
        logger.debug(f"Batch {chunk_idx + 1}/{len(chunks)} ({target_lang}): Starting translation of {len(chunk)} strings")
        results = await provider.translate_batch(chunk, target_lang)
        logger.debug(
            f"Batch {chunk_idx + 1}/{len(chunks)} ({target_lang}): Completed in {time.monotonic() - start:.2f}s"
        )

        # Never borrow a translation from a neighbouring position
        for position, original in enumerate(chunk):
            translated.append(results[position] if position < len(results) else original)

        if on_batch:
            on_batch(chunk_idx + 1, len(chunks), len(chunk))

    return translated


async def build_lookup(
    rows: List[Row],
    translatable_columns: Optional[Iterable[str]],
    target_lang: str,
    provider: TranslationProvider,
    batch_delay: float = 0.1,
    on_batch: Optional[BatchCallback] = None,
) -> Dict[str, str]:
    """
    Translate every distinct eligible string of rows into target_lang.

    Returns:
        Mapping from original string to translated string
    """
    texts = collect_translatable_texts(rows, translatable_columns)
    if not texts:
        return {}

    logger.debug(f"{len(texts)} distinct strings to translate into {target_lang}")
    translated = await translate_texts(texts, target_lang, provider, batch_delay=batch_delay, on_batch=on_batch)
    return dict(zip(texts, translated))
