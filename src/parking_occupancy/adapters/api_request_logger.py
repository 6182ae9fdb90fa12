"""Logging of raw occupancy API requests, enabled by PARKING_LOG_REQUESTS."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


def should_log_requests() -> bool:
    """Check if request logging is enabled via the PARKING_LOG_REQUESTS environment variable."""
    return os.getenv("PARKING_LOG_REQUESTS", "").lower() == "true"


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    return f"{url}&{param_str}" if "?" in url else f"{url}?{param_str}"


def _redact_sensitive_headers(headers: dict[str, str]) -> dict[str, str]:
    return {
        k: "***REDACTED***" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()
    }


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log an outgoing request if PARKING_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL.
        params: Query parameters (optional).
        headers: Request headers (optional); credentials are redacted.
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {_build_url_with_params(url, params)}"]
    if headers:
        log_parts.append(f"Headers: {json.dumps(_redact_sensitive_headers(headers), indent=2)}")

    logger.info("API Request:\n" + "\n".join(log_parts))


def log_api_response(url: str, status: int, body: str, preview_chars: int = 800) -> None:
    """Log a truncated response body if PARKING_LOG_REQUESTS is enabled."""
    if not should_log_requests():
        return

    preview = body[:preview_chars]
    suffix = "..." if len(body) > preview_chars else ""
    logger.info(f"API Response {status} from {url}:\n{preview}{suffix}")
