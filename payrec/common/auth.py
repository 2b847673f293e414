"""Shared-secret API key check for every non-operational path."""

import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from payrec.common.errors import Unauthorized
from payrec.common.logging import logger

API_KEY_HEADER = "X-API-KEY"
# Health, metrics and API docs stay reachable without a key.
DEFAULT_ALLOWLIST = ("/health", "/metrics", "/docs", "/redoc", "/openapi.json")


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Reject requests whose `X-API-KEY` header does not match `api_key`.

    The key is passed in explicitly when the app is built; the middleware
    never reads configuration on its own.
    """

    def __init__(self, app, api_key: str, allowlist: tuple[str, ...] = DEFAULT_ALLOWLIST) -> None:
        super().__init__(app)
        if not api_key:
            raise ValueError("api_key must be a non-empty string")
        self.api_key = api_key.encode()
        self.allowlist = allowlist

    def is_allowlisted(self, path: str) -> bool:
        return path.startswith(self.allowlist)

    def check(self, supplied: str | None) -> None:
        if supplied is None or not secrets.compare_digest(supplied.encode(), self.api_key):
            raise Unauthorized("Unauthorized")

    async def dispatch(self, request: Request, call_next):
        if self.is_allowlisted(request.url.path):
            return await call_next(request)
        try:
            self.check(request.headers.get(API_KEY_HEADER))
        except Unauthorized as exc:
            logger.warning("unauthorized_request path=%s", request.url.path)
            return PlainTextResponse(exc.detail, status_code=exc.status_code)
        return await call_next(request)
