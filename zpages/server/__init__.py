"""zpages HTTP surface: FastAPI app and uvicorn supervisor."""

from zpages.server.app import build_app, create_app, run_server

__all__ = ["build_app", "create_app", "run_server"]
