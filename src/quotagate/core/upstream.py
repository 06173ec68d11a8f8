"""
Single-shot JSON POST helper shared by the backend clients.

Every call opens its own short-lived aiohttp session with a bounded total
timeout. No retries.
"""

import asyncio
import json
import time
from typing import Any, Dict, Optional

import aiohttp
import structlog

from .exceptions import TransportFailure, UpstreamEmptyResult
from .metrics import MetricsCollector

logger = structlog.get_logger(__name__)

USER_AGENT = "quotagate/0.1.0"


async def post_json(
    service: str,
    operation: str,
    url: str,
    payload: Dict[str, Any],
    timeout_seconds: float,
    bearer_token: Optional[str] = None,
    metrics: Optional[MetricsCollector] = None,
) -> Dict[str, Any]:
    """
    POST a JSON payload and return the decoded JSON object.

    Raises:
        TransportFailure: connection error, timeout or non-2xx status
        UpstreamEmptyResult: 2xx response whose body is not a JSON object
    """
    headers = {
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    if bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"

    start = time.perf_counter()
    try:
        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=timeout_seconds)
        ) as session:
            async with session.post(url, json=payload, headers=headers) as response:
                if not 200 <= response.status < 300:
                    error_text = await response.text()
                    logger.warning(
                        "Backend returned error status",
                        service=service,
                        operation=operation,
                        status=response.status,
                        error=error_text[:200],
                    )
                    raise TransportFailure(
                        f"{service} {operation} failed with HTTP {response.status}",
                        details={"status": response.status},
                    )

                try:
                    body = await response.json(content_type=None)
                except (json.JSONDecodeError, UnicodeDecodeError) as e:
                    raise UpstreamEmptyResult(
                        f"{service} {operation} returned a non-JSON body"
                    ) from e

    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning(
            "Backend call did not complete",
            service=service,
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise TransportFailure(
            f"{service} {operation} could not be completed",
            details={"error_type": type(e).__name__},
        ) from e
    finally:
        if metrics is not None:
            metrics.record_upstream_call(service, operation, time.perf_counter() - start)

    if not isinstance(body, dict):
        raise UpstreamEmptyResult(f"{service} {operation} returned an unexpected payload")

    return body
