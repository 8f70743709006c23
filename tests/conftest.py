from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from twiml_server.config.settings import Settings  # noqa: E402
from twiml_server.server.app import TwimlServer  # noqa: E402

VALID_FORM = {
    "ApiVersion": "2010-04-01",
    "AccountSid": "AC00000000000000000000000000000000",
    "From": "+41791234567",
    "To": "+41441234567",
    "CallSid": "CA00000000000000000000000000000000",
}


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None, environment="local", twilio_auth_token=None, public_base_url=None)


@pytest.fixture()
def server(settings: Settings) -> TwimlServer:
    return TwimlServer(settings=settings)


@pytest.fixture()
def client(server: TwimlServer):
    # Error paths are asserted on the rendered 500 instead of re-raised.
    with TestClient(server.app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture()
def form() -> dict[str, str]:
    return dict(VALID_FORM)
