"""Pydantic models for UPCitemdb responses, display state and API payloads."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# UPCitemdb lookup response
# ---------------------------------------------------------------------------


class Offer(_Frozen):
    """One merchant's listing for a product."""

    merchant: str
    domain: str
    title: str
    currency: str | None = None
    price: float
    shipping: str
    condition: str
    availability: str | None = None
    #: Canonical detail page of the offer.
    link: str
    #: Epoch seconds of the last time UPCitemdb saw this offer.
    updated_t: int


class ProductRecord(_Frozen):
    """A matched product as returned in the ``items`` list."""

    ean: str
    title: str
    description: str
    upc: str | None = None
    brand: str
    model: str
    color: str
    size: str
    dimension: str | None = None
    weight: str
    category: str | None = None
    currency: str | None = None
    lowest_recorded_price: float | None = None
    highest_recorded_price: float | None = None
    images: tuple[str, ...] | None = None
    offers: tuple[Offer, ...] | None = None
    asin: str | None = None
    elid: str | None = None


class LookupResponse(_Frozen):
    """Top-level envelope of a ``/lookup`` response."""

    code: str
    total: int
    offset: int
    items: tuple[ProductRecord, ...]


# ---------------------------------------------------------------------------
# Display state
# ---------------------------------------------------------------------------


class DisplayModel(_Frozen):
    """UI-ready projection of a matched product."""

    kind: Literal["product"] = "product"
    description: str
    first_image: str | None = None
    offers: tuple[Offer, ...] = ()
    #: Display lines for each entry of ``offers``, in the same order.
    offer_lines: tuple[tuple[str, ...], ...] = ()


class NotFound(_Frozen):
    """The lookup succeeded but the product database had no match."""

    kind: Literal["not_found"] = "not_found"


class LookupFailure(_Frozen):
    """The lookup failed at transport or decoding level."""

    kind: Literal["network", "decode"]
    message: str


class DecoderFailure(_Frozen):
    """The capture session could not be opened or broke down."""

    kind: Literal["decoder_unavailable"] = "decoder_unavailable"
    message: str


ScanResult = Annotated[
    DisplayModel | NotFound | LookupFailure | DecoderFailure,
    Field(discriminator="kind"),
]


class SessionState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    RESOLVING = "resolving"


class SessionSnapshot(_Frozen):
    """Immutable view of the session controller, replaced on every change."""

    state: SessionState = SessionState.IDLE
    #: Counter of capture sessions started so far; 0 before the first one.
    session: int = 0
    symbol: str | None = None
    symbology: str | None = None
    result: ScanResult | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def capturing(self) -> bool:
        return self.state is SessionState.CAPTURING


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------


class SymbolEvent(BaseModel):
    """A decoded symbol pushed by a client-side decoder."""

    symbol: str = Field(..., min_length=1)
    symbology: str = "ean13"


class SettingsResponse(BaseModel):
    """Effective configuration, without secrets."""

    base_url: str
    timeout: float
    api_key_configured: bool
    symbologies: list[str] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str
