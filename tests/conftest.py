"""Pytest configuration - loads .env and provides a fake transport."""

import json
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from partnercenter.core.client import ServiceClient, TransportResponse
from partnercenter.core.registry import default_registry
from partnercenter.sdk import PartnerClient

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

BASE_URL = "https://pc.test/v1"


@dataclass
class RecordedRequest:
    """One request seen by the fake transport."""

    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8")) if self.body else None


class FakeTransport:
    """Transport that records requests and replays queued responses."""

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []
        self.responses: list[TransportResponse | Exception] = []
        self.handler: Callable[[RecordedRequest], TransportResponse] | None = None

    def queue(self, status: int = 200, body: Any = None, raw: bytes | None = None) -> None:
        if raw is None:
            raw = json.dumps(body).encode("utf-8") if body is not None else b""
        self.responses.append(TransportResponse(status=status, body=raw))

    def fail_with(self, error: Exception) -> None:
        self.responses.append(error)

    def send(self, method: str, url: str, headers: dict[str, str], body: bytes | None = None) -> TransportResponse:
        request = RecordedRequest(method, url, dict(headers), body)
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        if not self.responses:
            return TransportResponse(status=204)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def service(transport: FakeTransport) -> ServiceClient:
    return ServiceClient(base_url=BASE_URL, access_token="token-123", transport=transport, registry=default_registry())


@pytest.fixture
def client(transport: FakeTransport) -> PartnerClient:
    return PartnerClient(base_url=BASE_URL, access_token="token-123", transport=transport)
