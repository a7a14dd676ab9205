"""
Prometheus metrics middleware for API requests

Instruments all API requests with:
- Request count (by endpoint, method, status_code)
- Request duration (by endpoint, method)
"""

import time
from fastapi import Request

from server.metrics import metrics

# Path segments that follow these parents are identifiers, not routes
_ID_PARENTS = {
    'candidates': ':candidate_id',
    'selections': ':office',
    'offices': ':office',
}


async def metrics_middleware(request: Request, call_next):
    """Record Prometheus metrics for all API requests"""
    start_time = time.time()

    endpoint = _normalize_endpoint(request.url.path)
    method = request.method

    try:
        response = await call_next(request)
        duration = time.time() - start_time

        metrics.api_requests.labels(
            endpoint=endpoint,
            method=method,
            status_code=response.status_code
        ).inc()

        metrics.api_request_duration.labels(
            endpoint=endpoint,
            method=method
        ).observe(duration)

        return response

    except Exception:
        duration = time.time() - start_time

        # Record error as 500
        metrics.api_requests.labels(
            endpoint=endpoint,
            method=method,
            status_code=500
        ).inc()

        metrics.api_request_duration.labels(
            endpoint=endpoint,
            method=method
        ).observe(duration)

        raise


def _normalize_endpoint(path: str) -> str:
    """Normalize endpoint path for metrics cardinality control

    Converts:
        /api/admin/candidates/3f2a9c -> /api/admin/candidates/:candidate_id
        /api/ballot/selections/President -> /api/ballot/selections/:office
        /api/dashboard/offices/Auditor -> /api/dashboard/offices/:office
    """
    parts = [part for part in path.split('/') if part]
    normalized_parts = []

    for i, part in enumerate(parts):
        parent = parts[i - 1] if i > 0 else None
        if parent in _ID_PARENTS:
            normalized_parts.append(_ID_PARENTS[parent])
        else:
            normalized_parts.append(part)

    return '/' + '/'.join(normalized_parts)
