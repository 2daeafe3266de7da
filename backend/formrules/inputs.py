"""Input sources: where a validation session reads submitted values from.

MappingInput wraps a plain dict (tests, jobs, CLI). RequestInput wraps a
Starlette/FastAPI request and mirrors the classic GET/POST/PUT/cookie
accessors with default fallback.

Usage:
    @app.post("/signup")
    async def signup(source: RequestInput = Depends(request_input)):
        session = ValidationSession(source).register("email", "Email").rule("valid_email")
        ...
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from fastapi import Request

# Headers checked in order when looking for the client's real address
TRUE_IP_HEADERS = ["client-ip", "x-forwarded-for", "x-forwarded", "forwarded-for", "forwarded"]

# Methods whose form body is exposed as PUT data
PUT_METHODS = {"PUT", "PATCH", "DELETE"}


class InputSource(ABC):
    """Exposes submitted scalar values by key."""

    @abstractmethod
    def post(self, key: str, default: Any = None) -> Any:
        """Submitted value for key, or default when absent."""
        ...

    @abstractmethod
    def submitted(self) -> bool:
        """True when a non-empty submission payload is present."""
        ...


class MappingInput(InputSource):
    """Dict-backed input source."""

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data = dict(data or {})

    def post(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def submitted(self) -> bool:
        return len(self._data) > 0


class RequestInput(InputSource):
    """Input accessor over a Starlette/FastAPI request.

    The form body is read once by from_request(); every accessor after that
    is synchronous.
    """

    def __init__(
        self,
        request: Request,
        post_data: Optional[Mapping[str, Any]] = None,
        put_data: Optional[Mapping[str, Any]] = None,
    ):
        self.request = request
        self._post = dict(post_data or {})
        self._put = dict(put_data or {})

    @classmethod
    async def from_request(cls, request: Request) -> "RequestInput":
        """Build an accessor, reading the form body for body-carrying methods."""
        method = request.method.upper()
        body: dict[str, Any] = {}
        if method == "POST" or method in PUT_METHODS:
            form = await request.form()
            body = {k: v for k, v in form.items()}

        if method == "POST":
            return cls(request, post_data=body)
        return cls(request, put_data=body)

    # ── Value accessors ──

    def get(self, key: str, default: Any = None) -> Any:
        """Query string value, or default."""
        return self.request.query_params.get(key, default)

    def post(self, key: str, default: Any = None) -> Any:
        """POST form value, or default."""
        return self._post.get(key, default)

    def put(self, key: str, default: Any = None) -> Any:
        """PUT/PATCH/DELETE form value, or default."""
        return self._put.get(key, default)

    def delete(self, key: str, default: Any = None) -> Any:
        """Alias of put(): DELETE bodies are parsed the same way."""
        return self.put(key, default)

    def cookie(self, key: str, default: Any = None) -> Any:
        return self.request.cookies.get(key, default)

    def is_present(self, key: str, method: str = "post") -> bool:
        """Whether key exists (with a non-None value) in the given source."""
        method = method.lower()
        if method == "get":
            source = self.request.query_params
        elif method == "cookie":
            source = self.request.cookies
        else:
            source = self._post
        return key in source and source[key] is not None

    def submitted(self) -> bool:
        return len(self._post) > 0

    # ── Request facts ──

    def ip(self, default: str = "0.0.0.0") -> str:
        """Peer address of the client, or default."""
        client = self.request.client
        return client.host if client and client.host else default

    def true_ip(self) -> Optional[str]:
        """Best guess at the client's real address, checking proxy headers first."""
        for header in TRUE_IP_HEADERS:
            value = self.request.headers.get(header)
            if value is not None:
                return value
        client = self.request.client
        return client.host if client else None

    def referer(self, default: str = "") -> str:
        return self.request.headers.get("referer", default)

    def uri(self, segment: Optional[int] = None, default: Any = None) -> Any:
        """Request path without query string, or one '/'-separated segment of it.

        Example: for /get/version/1.2.3?gzipped=true
            uri()  -> '/get/version/1.2.3'
            uri(3) -> '1.2.3'
        """
        path = self.request.url.path
        if isinstance(segment, int) and not isinstance(segment, bool) and segment > 0:
            parts = path.split("/")
            if segment < len(parts):
                return parts[segment]
            return default
        return path

    def full_uri(self) -> str:
        """Path including the query string."""
        url = self.request.url
        return f"{url.path}?{url.query}" if url.query else url.path

    def is_ajax(self) -> bool:
        return self.request.headers.get("x-requested-with", "").lower() == "xmlhttprequest"

    def request_method(self) -> str:
        return self.request.method

    def user_agent(self) -> Optional[str]:
        return self.request.headers.get("user-agent")


async def request_input(request: Request) -> RequestInput:
    """FastAPI dependency: an input accessor for the current request."""
    return await RequestInput.from_request(request)
