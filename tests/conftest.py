"""Pytest fixtures for zpages tests."""

import io
import sys
from pathlib import Path

import pytest

# Ensure project root is in path for zpages imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


class ExitRecorder:
    """Stands in for os._exit so crash can be exercised without ending pytest."""

    def __init__(self):
        self.codes = []

    def __call__(self, code: int) -> None:
        self.codes.append(code)


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def log_context(log_stream):
    """LogContext writing to a buffer; propagates so caplog sees zpages records."""
    from zpages.core.logging_utils import LogContext

    ctx = LogContext(stream=log_stream, propagate=True)
    yield ctx
    ctx.close()


@pytest.fixture
def registry():
    from zpages.status.registry import StatusRegistry

    return StatusRegistry(
        name="data-store",
        uri="http://data-store.local:8080",
        service_type="platform",
        guid="0729a580-2240-11e6-9eb5-0002a5d5c51b",
        log_fields={"app": "zpages", "version": "1.0.0"},
    )


@pytest.fixture
def exit_recorder() -> ExitRecorder:
    return ExitRecorder()


@pytest.fixture
def support(registry, log_context, exit_recorder):
    from zpages.support.controller import SupportController

    return SupportController(registry, log_context, exit_func=exit_recorder)


@pytest.fixture
def loglevel(log_context):
    from zpages.support.loglevel import LogLevelController

    return LogLevelController(log_context)


@pytest.fixture
def version():
    from zpages.status.schemas import Version

    return Version(module="zpages", version="1.0.0", dependencies=[Version(module="fastapi", version="0.110.0")])


@pytest.fixture
def app(registry, support, loglevel, version, log_context):
    from zpages.server.app import create_app

    return create_app(registry, support, loglevel, version, log_context)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c
