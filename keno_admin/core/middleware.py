from typing import Iterable, List, Tuple

Header = Tuple[bytes, bytes]

DEFAULT_SECURITY_HEADERS: List[Header] = [
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"referrer-policy", b"no-referrer"),
]

# Responses under these paths may carry session tokens or cookies.
NO_STORE_PREFIXES = ("/api/v1/auth",)


class SecurityHeadersMiddleware:
    """ASGI middleware adding security headers to every HTTP response.

    Auth responses are additionally marked ``Cache-Control: no-store``.
    """

    def __init__(self, app, headers: Iterable[Header] = DEFAULT_SECURITY_HEADERS, no_store_prefixes=NO_STORE_PREFIXES):
        self.app = app
        self.headers = list(headers)
        self.no_store_prefixes = tuple(no_store_prefixes)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        extra = list(self.headers)
        if scope.get("path", "").startswith(self.no_store_prefixes):
            extra.append((b"cache-control", b"no-store"))

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                present = {name.lower() for name, _ in message.get("headers", [])}
                message.setdefault("headers", [])
                message["headers"].extend(h for h in extra if h[0] not in present)
            await send(message)

        await self.app(scope, receive, send_with_headers)
