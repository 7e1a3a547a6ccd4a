"""FastAPI application for scanlookup."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scanlookup import __version__
from scanlookup.config import Settings, load_settings
from scanlookup.decoders import PushDecoder
from scanlookup.models import HealthResponse, SettingsResponse
from scanlookup.routers import ean, scan
from scanlookup.services.lookup import ProductLookupClient
from scanlookup.services.session import SessionController

settings: Settings = Settings()
lookup_client: ProductLookupClient = ProductLookupClient()
decoder: PushDecoder = PushDecoder()
controller: SessionController = SessionController(decoder, lookup_client)


def configure(new_settings: Settings) -> None:
    """(Re)build the lookup client, decoder and controller from *new_settings*."""
    global settings, lookup_client, decoder, controller  # noqa: PLW0603
    settings = new_settings
    lookup_client = ProductLookupClient(
        base_url=settings.lookup.base_url,
        api_key=settings.lookup.api_key,
        timeout=settings.lookup.timeout,
    )
    decoder = PushDecoder(settings.decoder.symbologies)
    controller = SessionController(decoder, lookup_client)
    logging.getLogger("scanlookup").setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """Load configuration on startup and release the capture on shutdown."""
    configure(load_settings())
    yield
    controller.cancel()


app = FastAPI(
    title="scanlookup",
    description="Barcode scan and product lookup service",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ean.router, prefix="/api/ean", tags=["ean"])
app.include_router(scan.router, prefix="/api/scan", tags=["scan"])


@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return HealthResponse(version=__version__)


@app.get("/api/settings", response_model=SettingsResponse)
async def get_settings() -> SettingsResponse:
    """Return the effective configuration, without the API key."""
    return SettingsResponse(
        base_url=settings.lookup.base_url,
        timeout=settings.lookup.timeout,
        api_key_configured=bool(settings.lookup.api_key),
        symbologies=settings.decoder.symbologies,
    )
