"""
CORS del frontend

Se resuelve antes del routing: los preflight OPTIONS se contestan aquí y
nunca llegan a los routers.
"""

import re
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from arena.core.config import Settings


PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept, Origin, X-Requested-With",
    "Access-Control-Max-Age": "86400",  # 24h
}


class OriginPolicy:
    """Orígenes permitidos: lista explícita más un patrón opcional."""

    def __init__(self, origins: list[str], pattern: Optional[str] = None):
        self.origins = frozenset(o for o in origins if o)
        self.pattern = re.compile(pattern) if pattern else None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OriginPolicy":
        return cls(
            [origin.strip() for origin in settings.cors_origins.split(",")],
            settings.cors_origin_regex,
        )

    def allows(self, origin: str) -> bool:
        if not origin:
            return False
        if origin in self.origins:
            return True
        return bool(self.pattern and self.pattern.fullmatch(origin))


def _origin_headers(origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
    }


class ArenaCORSMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, policy: OriginPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")
        allowed = self.policy.allows(origin)

        if request.method == "OPTIONS":
            if not allowed:
                return Response(status_code=403, content="Origin not allowed")
            return Response(status_code=200, headers={**PREFLIGHT_HEADERS, **_origin_headers(origin)})

        response = await call_next(request)
        if allowed:
            response.headers.update(_origin_headers(origin))
        return response
