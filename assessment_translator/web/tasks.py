"""
Asynchronous task helpers for long-running background jobs (e.g. translation).

Each job runs the asyncio translation pipeline on its own event loop inside
a daemon thread, so the Flask request returns immediately.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from assessment_translator.logger import get_logger
from assessment_translator.providers.endpoint_cache import PipelineEndpointCache
from assessment_translator.translation.manager import translate_workbook_sync
from assessment_translator.translation.models import Workbook, results_to_dict
from assessment_translator.translation.progress import TranslationProgress

logger = get_logger(__name__)


@dataclass
class JobState:
    """In-memory representation of an asynchronous job."""

    job_id: str
    languages: List[str] = field(default_factory=list)
    sheet_names: List[str] = field(default_factory=list)
    provider: Optional[str] = None
    translatable_columns: Optional[List[str]] = None
    cancel_requested: bool = False
    state: str = "pending"  # pending|running|completed|failed|cancelled
    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    progress: Dict[str, Any] = field(default_factory=dict)
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    last_update: float = field(default_factory=time.time)

    def request_cancel(self):
        """Mark this job as requested for cancellation."""
        self.cancel_requested = True
        self.last_update = time.time()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_jobs: Dict[str, JobState] = {}
_jobs_lock = threading.Lock()
_JOB_RETENTION_SECONDS = 600  # Retain job info for 10 minutes after completion


def create_translation_job(
    workbook: Workbook,
    languages: List[str],
    translatable_columns: Optional[List[str]],
    config: Dict[str, Any],
    endpoint_cache: PipelineEndpointCache,
    provider: Optional[str] = None,
) -> JobState:
    """
    Create and launch an asynchronous translation job.

    The request must already be validated; the job only runs the pipeline.

    Returns:
        JobState for the new job (already registered and running in background).
    """
    job_id = uuid.uuid4().hex
    job_state = JobState(
        job_id=job_id,
        languages=list(languages),
        sheet_names=list(workbook.keys()),
        provider=provider,
        translatable_columns=translatable_columns,
    )

    with _jobs_lock:
        _cleanup_jobs_locked()
        _jobs[job_id] = job_state

    thread = threading.Thread(
        target=_run_translation_job,
        args=(job_state, workbook, config, endpoint_cache),
        name=f"translation-job-{job_id}",
        daemon=True,
    )
    thread.start()
    logger.info(
        "Translation job %s started (languages=%s, sheets=%s)",
        job_id,
        job_state.languages,
        len(job_state.sheet_names),
    )
    return job_state


def get_job(job_id: str) -> Optional[JobState]:
    """Fetch a job by ID (if still retained)."""
    with _jobs_lock:
        job = _jobs.get(job_id)
        if job and job.finished_at and (time.time() - job.finished_at) > _JOB_RETENTION_SECONDS:
            # Expired; remove
            _jobs.pop(job_id, None)
            return None
        return job


def cancel_job(job_id: str) -> bool:
    """
    Request cancellation of a running job.

    In-flight batches are not interrupted; the job's result is discarded when
    the pipeline returns.

    Returns:
        True if job was found and cancellation requested, False otherwise.
    """
    with _jobs_lock:
        job = _jobs.get(job_id)
        if not job:
            return False
        if job.state in ("completed", "failed", "cancelled"):
            return False  # Already finished
        job.request_cancel()
        logger.info("Cancellation requested for job %s", job_id)
        return True


def reset_jobs() -> int:
    """Abandon every job: running ones are cancelled, all are forgotten."""
    with _jobs_lock:
        for job in _jobs.values():
            if job.state in ("pending", "running"):
                job.request_cancel()
        count = len(_jobs)
        _jobs.clear()
    if count:
        logger.info("Discarded %s translation job(s)", count)
    return count


def _run_translation_job(
    job: JobState,
    workbook: Workbook,
    config: Dict[str, Any],
    endpoint_cache: PipelineEndpointCache,
):
    """Worker function executed in a background thread."""
    job.state = "running"
    job.started_at = time.time()
    job.last_update = job.started_at
    try:
        def on_progress(progress: TranslationProgress):
            with _jobs_lock:
                job.progress = progress.to_dict()
                job.last_update = time.time()

        results = translate_workbook_sync(
            workbook,
            job.languages,
            job.translatable_columns,
            config=config,
            provider_name=job.provider,
            endpoint_cache=endpoint_cache,
            progress_callback=on_progress,
        )

        with _jobs_lock:
            job.finished_at = time.time()
            job.last_update = job.finished_at
            if job.cancel_requested:
                job.state = "cancelled"
                logger.info("Translation job %s cancelled; results discarded", job.job_id)
                return
            job.result = results_to_dict(results)
            job.state = "completed"
        logger.info("Translation job %s finished (languages=%s)", job.job_id, len(results))
    except Exception as exc:
        job.state = "failed"
        error_type = type(exc).__name__
        error_message = str(exc)
        job.error = f"{error_type}: {error_message}"
        job.finished_at = time.time()
        job.last_update = job.finished_at
        logger.exception(
            "Translation job %s failed: %s: %s",
            job.job_id,
            error_type,
            error_message,
        )


def _cleanup_jobs_locked():
    """Remove completed jobs that exceeded retention period (call with lock held)."""
    now = time.time()
    expired = [
        job_id
        for job_id, job in _jobs.items()
        if job.finished_at and (now - job.finished_at) > _JOB_RETENTION_SECONDS
    ]
    for job_id in expired:
        _jobs.pop(job_id, None)
