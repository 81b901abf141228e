"""
ASGI entry points for the two backend services.

    uvicorn blogsite.main:user_app --port 8081
    uvicorn blogsite.main:blog_app --port 8082

Both apps share the same factory so the error-response formatter,
middleware and startup behaviour are identical.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blogsite.config import configure_logging, settings
from blogsite.database import create_tables
from blogsite.errors import register_exception_handlers
from blogsite.middleware import TimingMiddleware
from blogsite.routers import blogs, users

logger = logging.getLogger(__name__)


def create_app(title: str, description: str, *routers: APIRouter) -> FastAPI:
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if settings.CREATE_TABLES:
            await create_tables()
        logger.info("%s started (env=%s)", title, settings.APP_ENV)
        yield
        # Shutdown
        logger.info("%s stopped", title)

    app = FastAPI(
        title=title,
        description=description,
        version="1.0.0",
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(TimingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routers
    for router in routers:
        app.include_router(router)
    return app


user_app = create_app(
    "Blogsite User Service",
    "User registration and lookup",
    users.router,
)

blog_app = create_app(
    "Blogsite Blog Service",
    "Blog creation, queries and deletion",
    blogs.router,
)
