"""Response hardening for the HTTP surface: security headers and CORS."""

from typing import Awaitable, Callable, MutableMapping

from aiohttp import web

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Cross-Origin-Opener-Policy": "same-origin",
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,HEAD,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _apply_headers(headers: MutableMapping[str, str]) -> None:
    for header, value in {**SECURITY_HEADERS, **CORS_HEADERS}.items():
        headers.setdefault(header, value)


@web.middleware
async def security_headers_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        response: web.StreamResponse = web.Response(status=204)
    else:
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            _apply_headers(exc.headers)
            raise

    # WebSocket responses are already prepared by the time they return
    if not response.prepared:
        _apply_headers(response.headers)
    return response
