"""
Shared HTTP helpers for the provider adapters.
"""

from typing import Any

import httpx


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys

    Returns:
        httpx.Timeout object
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 30.0),
            read=timeout_config.get('read', 30.0),
            pool=timeout_config.get('pool', 10.0),
        )
    else:
        timeout_value = float(timeout_config) if timeout_config else 30.0
        return httpx.Timeout(
            connect=10.0,
            write=30.0,
            read=timeout_value,
            pool=10.0,
        )


def describe_http_error(response: httpx.Response, provider: str) -> str:
    """Build a readable message for a non-success provider response."""
    status_code = response.status_code
    error_text = response.reason_phrase or "Unknown error"

    try:
        error_json = response.json()
        if isinstance(error_json, dict) and "error" in error_json:
            error_detail = error_json["error"]
            if isinstance(error_detail, dict):
                error_text = error_detail.get("message", str(error_detail))
            else:
                error_text = str(error_detail)
    except ValueError:
        error_text = response.text[:500] if response.text else error_text

    return f"{provider} API error ({status_code}): {error_text}"
