import copy

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

import scanlookup.app as app_module
from scanlookup.app import app
from scanlookup.config import Settings
from scanlookup.decoders import PushDecoder
from scanlookup.services.lookup import ProductLookupClient
from scanlookup.services.session import SessionController

WIDGET_ITEM = {
    "ean": "012345678905",
    "title": "Widget",
    "description": "A widget",
    "upc": "012345678905",
    "brand": "Acme",
    "model": "W1",
    "color": "red",
    "size": "M",
    "weight": "1lb",
    "images": ["http://x/1.jpg"],
    "offers": [
        {
            "merchant": "Shop",
            "domain": "shop.com",
            "title": "Widget",
            "price": 9.99,
            "shipping": "Free",
            "condition": "New",
            "link": "http://shop.com/w1",
            "updated_t": 1000,
        }
    ],
}


def lookup_response(*items: dict) -> dict:
    """Build a UPCitemdb ``/lookup`` body around *items*."""
    return {"code": "OK", "total": len(items), "offset": 0, "items": [copy.deepcopy(i) for i in items]}


class StubUpstream:
    """Stands in for the UPCitemdb API and records every request it gets."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.response = httpx.Response(200, json=lookup_response())
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    def respond(self, status_code: int = 200, **kwargs) -> None:
        self.response = httpx.Response(status_code, **kwargs)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class FakeDecoder:
    """Capture session double that counts lifecycle calls."""

    def __init__(self, start_error: Exception | None = None) -> None:
        self.start_error = start_error
        self.start_calls = 0
        self.stop_calls = 0
        self.on_symbol = None
        self.on_error = None

    def subscribe(self, on_symbol, on_error) -> None:
        self.on_symbol = on_symbol
        self.on_error = on_error

    def start(self) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error

    def stop(self) -> None:
        self.stop_calls += 1

    def emit(self, symbol: str, symbology: str = "ean13") -> None:
        self.on_symbol(symbol, symbology)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def lookup_client(upstream: StubUpstream) -> ProductLookupClient:
    return ProductLookupClient(transport=upstream.transport())


@pytest.fixture(autouse=True)
def _wire_app(upstream: StubUpstream, monkeypatch: pytest.MonkeyPatch):
    """Point the app's services at the stub upstream for every test."""
    settings = Settings()
    client = ProductLookupClient(base_url=settings.lookup.base_url, transport=upstream.transport())
    decoder = PushDecoder(settings.decoder.symbologies)
    monkeypatch.setattr(app_module, "settings", settings)
    monkeypatch.setattr(app_module, "lookup_client", client)
    monkeypatch.setattr(app_module, "decoder", decoder)
    monkeypatch.setattr(app_module, "controller", SessionController(decoder, client))


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
