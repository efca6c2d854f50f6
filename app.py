"""
App assembly entry point.

Re-exports the FastAPI `app` from `emporium.api.main` so the service can be
started with `uvicorn app:app`.
"""

from emporium.api.main import app  # noqa: F401
