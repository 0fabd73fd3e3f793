import json
import logging
import os
import random
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from ..obs import capture_exception
from ..utils.responses import err
from .request_id import current_request_id

# Fields in requests that should be redacted from logs
PII_KEYS = {
    "password",
    "phone",
    "customerphone",
    "customeremail",
    "email",
    "address",
    "ordernumber",
}
LOG_SAMPLE_2XX = float(os.getenv("LOG_SAMPLE_2XX", "0.1"))

logger = logging.getLogger("api")


def _redact(obj):
    if isinstance(obj, dict):
        return {
            k: ("***" if k.lower() in PII_KEYS else _redact(v)) for k, v in obj.items()
        }
    if isinstance(obj, list):
        return [_redact(v) for v in obj]
    return obj


class LoggingMiddleware(BaseHTTPMiddleware):
    """Emit one structured record per request, tagged with its request id.

    Successful responses are sampled via ``LOG_SAMPLE_2XX``; every client or
    server error is logged. Unhandled exceptions are converted into a 500
    envelope carrying an ``error_id`` that is also sent to the error sink.
    """

    async def dispatch(self, request: Request, call_next):
        req_id = getattr(request.state, "request_id", None) or current_request_id()
        start = time.perf_counter()
        error_id = None
        try:
            response = await call_next(request)
        except Exception as exc:
            error_id = uuid.uuid4().hex
            capture_exception(exc)
            payload = err("INTERNAL", "Internal Server Error")
            payload["error_id"] = error_id
            response = JSONResponse(payload, status_code=500)
        dur_ms = int((time.perf_counter() - start) * 1000)
        status = response.status_code

        if 200 <= status < 300 and random.random() >= LOG_SAMPLE_2XX:
            return response

        record = {
            "event": "http",
            "req_id": req_id,
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "latency_ms": dur_ms,
        }
        if request.query_params:
            record["query"] = _redact(dict(request.query_params))
        if error_id:
            record["error_id"] = error_id
        log_fn = logger.error if status >= 500 else logger.info
        log_fn(
            json.dumps(record),
            extra={"route": request.url.path, "status": status, "latency_ms": dur_ms},
        )
        return response
