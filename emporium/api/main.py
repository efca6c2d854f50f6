"""
FastAPI app assembly: logging, middleware and router wiring.
"""
import logging
import os

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from emporium.api.admin import router as admin_router
from emporium.api.auth import has_identity_headers
from emporium.api.blog import router as blog_router
from emporium.api.chat import admin_router as chat_admin_router
from emporium.api.chat import router as chat_router
from emporium.api.errors import install_error_handlers
from emporium.api.live import router as live_router
from emporium.api.shop import router as shop_router
from emporium.api.support import router as support_router
from emporium.live import capture
from emporium.live.hub import hub
from emporium.utils.runtime import dev_mode_requested

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Emporium Service",
    description="Blog, shop and live chat API with a realtime change feed.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

DEFAULT_ORIGINS = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
]


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or DEFAULT_ORIGINS


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

READ_ONLY_FOR_GUESTS = ("/api/blog", "/api/shop")


# Middleware: enforce read-only content APIs for unauthenticated requests
@app.middleware("http")
async def enforce_readonly_for_guests(request: Request, call_next):
    if request.method in ("POST", "PUT", "PATCH", "DELETE") and not dev_mode_requested():
        path = request.url.path or ""
        if path.startswith(READ_ONLY_FOR_GUESTS) and not has_identity_headers(request.headers):
            return JSONResponse(
                {"detail": "Guest mode is read-only. Sign in to perform changes."},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
    return await call_next(request)


install_error_handlers(app)
capture.install(hub)

app.include_router(support_router)
app.include_router(blog_router)
app.include_router(shop_router)
app.include_router(chat_router)
app.include_router(chat_admin_router)
app.include_router(admin_router)
app.include_router(live_router)
