"""
CORS Middleware - Cross-Origin Resource Sharing for the function endpoints.

The function endpoints are called from the browser app and from database
triggers, so by default any origin is accepted.

Usage:
    from app.middleware.cors import CORSMiddleware

    app.add_middleware(CORSMiddleware, allowed_origins=["*"])

Headers added:
- Access-Control-Allow-Origin: ``*`` or the matching origin
- Access-Control-Allow-Headers: authorization, x-client-info, apikey, content-type
- Access-Control-Allow-Methods: on preflight responses only

Preflight OPTIONS requests are answered here with ``200 ok`` and never
reach the routes.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse, Response

from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

WILDCARD = "*"
DEFAULT_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
DEFAULT_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Handles preflight OPTIONS requests and adds CORS headers to responses.
    """

    def __init__(
        self,
        app,
        allowed_origins: list[str] | None = None,
        allow_methods: list[str] | None = None,
        allow_headers: list[str] | None = None,
    ):
        """
        Args:
            app: FastAPI application
            allowed_origins: Allowed origins; ``["*"]`` (the default) allows any
            allow_methods: Methods advertised on preflight responses
            allow_headers: Request headers the browser may send
        """
        super().__init__(app)
        self.allowed_origins = allowed_origins or [WILDCARD]
        self.allow_methods = allow_methods or DEFAULT_ALLOW_METHODS
        self.allow_headers = allow_headers or DEFAULT_ALLOW_HEADERS

        logger.info("CORS middleware initialized", allowed_origins=self.allowed_origins)

    async def dispatch(self, request, call_next):
        origin = request.headers.get("origin")
        allow_origin = self._allow_origin(origin)

        if request.method == "OPTIONS":
            if allow_origin is None:
                logger.warning("CORS preflight rejected - origin not allowed", origin=origin)
                return Response(status_code=403, content="Origin not allowed")
            return self._preflight_response(allow_origin)

        response = await call_next(request)

        if allow_origin is not None:
            response.headers["Access-Control-Allow-Origin"] = allow_origin
            response.headers["Access-Control-Allow-Headers"] = ", ".join(self.allow_headers)
        elif origin:
            logger.warning(
                "CORS request from disallowed origin", origin=origin, path=request.url.path
            )

        return response

    def _allow_origin(self, origin: str | None) -> str | None:
        """Value for Access-Control-Allow-Origin, or None when not allowed."""
        if WILDCARD in self.allowed_origins:
            return WILDCARD
        if origin and origin in self.allowed_origins:
            return origin
        return None

    def _preflight_response(self, allow_origin: str) -> Response:
        headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ", ".join(self.allow_methods),
            "Access-Control-Allow-Headers": ", ".join(self.allow_headers),
        }
        logger.debug("CORS preflight request handled", origin=allow_origin)
        return PlainTextResponse("ok", status_code=200, headers=headers)
