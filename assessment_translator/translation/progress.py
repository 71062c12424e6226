"""
Translation Progress Data Class

Contains the TranslationProgress dataclass for tracking translation progress.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass
class TranslationProgress:
    """Progress information for ongoing translation."""
    current_language: str
    current_language_name: str
    total_languages: int
    completed_languages: int
    current_sheet: str = ""
    # Batch progress fields
    current_batch: int = 0           # Current batch number (1-indexed)
    total_batches: int = 0           # Total batches for current sheet
    batch_texts_count: int = 0       # Number of texts in current batch
    phase: str = "translating"       # "translating", "batch_done", "language_done", "failed"
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
