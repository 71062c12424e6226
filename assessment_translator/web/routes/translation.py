"""Translation API routes."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request

from assessment_translator.logger import get_logger
from assessment_translator.providers.exceptions import InputError, TranslationError
from assessment_translator.providers.service import resolve_provider_name
from assessment_translator.translation.manager import translate_workbook, validate_request
from assessment_translator.translation.models import (
    Workbook,
    results_to_dict,
    single_sheet_workbook,
    workbook_from_dict,
)
from assessment_translator.web.tasks import (
    cancel_job,
    create_translation_job,
    get_job,
    reset_jobs,
)

translation_bp = Blueprint("translation", __name__)
logger = get_logger(__name__)


def _error_response(error: TranslationError, status: int = 400):
    payload: Dict[str, Any] = {"error": str(error), "code": error.code or "translation_error"}
    if error.details:
        payload["details"] = error.details
    return jsonify(payload), status


def _parse_request(data: Any) -> Tuple[Workbook, List[str], Optional[List[str]], Optional[str]]:
    """
    Read workbook, languages, column allow-list and provider from a request body.

    Accepted workbook shapes:
        {"workbook": {"<sheet>": {"headers": [...], "rows": [...]}}}   ("sheets" is accepted as an alias)
        {"rows": [...], "headers": [...], "sheet_name": "..."}   (single sheet)

    Raises:
        InputError: On a malformed body.
    """
    if not isinstance(data, dict):
        raise InputError("Request body must be a JSON object")

    config = current_app.config["TRANSLATOR_CONFIG"]
    sheets = data.get("workbook", data.get("sheets"))

    if isinstance(sheets, dict):
        if not all(isinstance(sheet, dict) for sheet in sheets.values()):
            raise InputError("Each sheet must be an object with headers and rows")
        workbook = workbook_from_dict(sheets)
    elif isinstance(data.get("rows"), list):
        workbook = single_sheet_workbook(
            data["rows"],
            data.get("headers"),
            name=data.get("sheet_name") or "Sheet1",
        )
    else:
        raise InputError("Please upload a file and select languages")

    languages = data.get("languages")
    if not isinstance(languages, list) or not all(isinstance(code, str) for code in languages):
        raise InputError("languages must be a list of language codes")

    if "translatable_columns" in data:
        columns = data["translatable_columns"]
        if columns is not None and (
            not isinstance(columns, list) or not all(isinstance(c, str) for c in columns)
        ):
            raise InputError("translatable_columns must be a list of column names or null")
    else:
        columns = config.get("translation", {}).get("translatable_columns")

    provider = data.get("provider") or None
    resolve_provider_name(config, provider)

    return workbook, validate_request(workbook, languages), columns, provider


@translation_bp.post("/translate")
def translate():
    """Translate a workbook synchronously and return every language at once."""
    data = request.get_json(silent=True)
    try:
        workbook, languages, columns, provider = _parse_request(data)
    except TranslationError as e:
        logger.warning("Rejected translation request: %s", e)
        return _error_response(e)

    results = asyncio.run(
        translate_workbook(
            workbook,
            languages,
            columns,
            config=current_app.config["TRANSLATOR_CONFIG"],
            provider_name=provider,
            endpoint_cache=current_app.extensions["endpoint_cache"],
        )
    )
    return jsonify({"languages": languages, "results": results_to_dict(results)})


@translation_bp.post("/jobs")
def start_translation_job():
    """Start an asynchronous translation job."""
    data = request.get_json(silent=True)
    try:
        workbook, languages, columns, provider = _parse_request(data)
    except TranslationError as e:
        logger.warning("Rejected translation job: %s", e)
        return _error_response(e)

    job = create_translation_job(
        workbook,
        languages,
        columns,
        config=current_app.config["TRANSLATOR_CONFIG"],
        endpoint_cache=current_app.extensions["endpoint_cache"],
        provider=provider,
    )
    return jsonify({"job_id": job.job_id, "job": job.to_dict()}), 202


@translation_bp.get("/jobs/<job_id>")
def get_translation_job(job_id: str):
    """Return status, latest progress and (when done) results of a job."""
    job = get_job(job_id)
    if not job:
        return jsonify({"error": "Job not found or expired"}), 404
    return jsonify(job.to_dict())


@translation_bp.post("/jobs/<job_id>/cancel")
def cancel_translation_job(job_id: str):
    """Cancel a running translation job."""
    if not get_job(job_id):
        return jsonify({"error": "Job not found or expired"}), 404
    if cancel_job(job_id):
        return jsonify({"status": "cancellation_requested", "job_id": job_id})
    return jsonify({"error": "Job has already finished"}), 400


@translation_bp.post("/reset")
def reset_session():
    """Discard all jobs and forget resolved provider endpoints."""
    discarded = reset_jobs()
    current_app.extensions["endpoint_cache"].clear()
    return jsonify({"status": "reset", "discarded_jobs": discarded})
