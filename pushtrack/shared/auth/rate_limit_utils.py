"""Simple in-memory, per-IP rate limiting for auth endpoints."""

import os
import time
from collections import deque
from threading import Lock
from typing import Dict, Tuple

from fastapi import HTTPException, Request, status

_rate_limit_store: Dict[Tuple[str, str], deque] = {}
_rate_limit_lock = Lock()


def get_client_ip(request: Request) -> str:
    """Extracts client IP address, considering common proxy headers."""
    x_forwarded_for = request.headers.get("X-Forwarded-For")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    client = request.client
    if client and client.host:
        return client.host
    return "unknown"


def check_rate_limit(client_ip: str, action: str, max_requests: int, window_seconds: int) -> None:
    """Raises 429 when client_ip has used up max_requests for action within the window."""
    if os.environ.get("DISABLE_RATE_LIMIT") == "1":
        return

    now = time.time()
    key = (client_ip, action)
    with _rate_limit_lock:
        request_times = _rate_limit_store.setdefault(key, deque())
        while request_times and request_times[0] <= now - window_seconds:
            request_times.popleft()
        if len(request_times) >= max_requests:
            retry_after = int(request_times[0] + window_seconds - now) + 1
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many {action} attempts. Limit: {max_requests} per {window_seconds}s.",
                    "retry_after_seconds": max(retry_after, 1)
                }
            )
        request_times.append(now)


def reset_rate_limits() -> None:
    with _rate_limit_lock:
        _rate_limit_store.clear()
