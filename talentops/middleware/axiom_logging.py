"""API 요청 로깅 미들웨어 — Axiom 전송 및 표준 로거 기록.

API request logging middleware.
Every request gets a request id (taken from ``X-Request-ID`` or generated)
that is echoed back in the response. One structured event per request is
sent to Axiom when a token and dataset are configured, and always written
to the ``talentops.access`` logger.
Sensitive fields (password, token, secret, authorization) are masked.
"""

import json
import logging
import re
import time
import uuid
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from talentops.config import Settings, settings as default_settings

logger = logging.getLogger("talentops.access")

# 마스킹 대상 필드 패턴 — Keys masked in request bodies and query strings
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

REQUEST_ID_HEADER: str = "X-Request-ID"


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹 (Recursively mask sensitive keys; long lists are cut to 20 items)."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            key: "***" if _SENSITIVE_KEYS.search(str(key)) else mask_sensitive(value, depth + 1)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def _error_detail(body: bytes) -> str:
    try:
        detail: Any = json.loads(body).get("detail", "")
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        return body.decode("utf-8", errors="replace")[:500]
    text: str = detail if isinstance(detail, str) else json.dumps(detail, ensure_ascii=False)
    return text[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하는 미들웨어.

    Logs method, path, params, masked body, status, duration and the error
    detail of failed responses.
    """

    def __init__(self, app: Any, config: Settings = default_settings) -> None:
        super().__init__(app)
        self._dataset: str = config.AXIOM_DATASET
        self._client: AxiomClient | None = None
        if config.AXIOM_API_TOKEN and config.AXIOM_DATASET:
            self._client = AxiomClient(token=config.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
            return None
        body: bytes = await request.body()
        if not body:
            return None
        try:
            return mask_sensitive(json.loads(body))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    def _ship(self, event: dict[str, Any]) -> None:
        if event["status_code"] >= 500:
            logger.error("%s %s -> %s (%sms)", event["method"], event["path"], event["status_code"], event["duration_ms"])
        else:
            logger.info("%s %s -> %s (%sms)", event["method"], event["path"], event["status_code"], event["duration_ms"])
        if self._client is None:
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:  # noqa: BLE001
            logger.warning("Axiom ingest failed: %s", exc)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        request_id: str = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started: float = time.perf_counter()
        request_body: Any = await self._read_body(request)

        event: dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))
        if request_body is not None:
            event["request_body"] = request_body

        try:
            response: Response = await call_next(request)
            event["status_code"] = response.status_code

            # 에러 응답 본문에서 사유 추출 — Read the error detail, then rebuild the consumed response
            if response.status_code >= 400:
                body: bytes = b""
                async for chunk in response.body_iterator:
                    body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = _error_detail(body)
                response = Response(
                    content=body,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            self._ship(event)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
