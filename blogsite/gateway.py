"""
API gateway: stateless path-prefix forwarding to the backend services.

    uvicorn blogsite.gateway:app --port 8080

The route table is ordered and the first matching prefix wins, which is
how the blog endpoints living under ``/user/...`` are kept away from the
user service's catch-all ``/user/`` prefix.  The gateway adds no business
semantics: method, path, query, body and end-to-end headers go through
unchanged, and the backend's status, body and headers come back
unchanged.
"""
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from blogsite.config import configure_logging, settings
from blogsite.errors import error_response, register_exception_handlers
from blogsite.middleware import TimingMiddleware

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1.0/blogsite"

USER_SERVICE = "user-service"
BLOG_SERVICE = "blog-service"

ROUTES: list[tuple[str, str]] = [
    (f"{API_PREFIX}/user/blogs/", BLOG_SERVICE),
    (f"{API_PREFIX}/user/getall", BLOG_SERVICE),
    (f"{API_PREFIX}/user/delete/", BLOG_SERVICE),
    (f"{API_PREFIX}/blogs/", BLOG_SERVICE),
    (f"{API_PREFIX}/health", BLOG_SERVICE),
    (f"{API_PREFIX}/user/", USER_SERVICE),
]

# Connection-scoped headers that must not be relayed in either direction.
HOP_BY_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
    "content-encoding",
})

# Replaced by the gateway's own timing header.
UPSTREAM_ONLY_HEADERS = frozenset({"x-response-time-ms"})


def resolve_service(path: str) -> str | None:
    """Return the backend name for *path*, or None when no route matches."""
    for prefix, service in ROUTES:
        if path.startswith(prefix):
            return service
    return None


def service_url(service: str) -> str:
    if service == USER_SERVICE:
        return settings.USER_SERVICE_URL.rstrip("/")
    return settings.BLOG_SERVICE_URL.rstrip("/")


def _end_to_end(headers) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() not in HOP_BY_HOP_HEADERS}


# ---------------------------------------------------------------------------
# Shared HTTP client
# ---------------------------------------------------------------------------

def create_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.GATEWAY_TIMEOUT,
        limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
    )


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.http_client = create_http_client()
    logger.info(
        "Gateway routing to user service (%s) and blog service (%s)",
        settings.USER_SERVICE_URL,
        settings.BLOG_SERVICE_URL,
    )
    yield
    await app.state.http_client.aclose()


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

configure_logging()

app = FastAPI(
    title="Blogsite API Gateway",
    description="Path-based forwarding to the user and blog services",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}


@app.api_route(
    API_PREFIX + "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
async def forward(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    path = request.url.path
    service = resolve_service(path)
    if service is None:
        return error_response(404, "Not Found", message=f"No route for path: {path}")

    url = service_url(service) + path
    if request.url.query:
        url = f"{url}?{request.url.query}"

    try:
        upstream = await client.request(
            request.method,
            url,
            content=await request.body(),
            headers=_end_to_end(request.headers),
        )
    except httpx.RequestError as exc:
        logger.error("Forwarding %s %s to %s failed: %s", request.method, path, service, exc)
        return error_response(502, "Bad Gateway", message=f"{service} is unavailable")

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers={
            k: v for k, v in _end_to_end(upstream.headers).items()
            if k.lower() not in UPSTREAM_ONLY_HEADERS
        },
    )
