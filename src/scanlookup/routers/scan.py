"""Scan session endpoints.

A client device opens a session, pushes the symbols its camera decodes and
polls the session snapshot for the result.
"""

from fastapi import APIRouter, HTTPException

import scanlookup.app as _app
from scanlookup.models import SessionSnapshot, SymbolEvent
from scanlookup.services.session import SessionBusyError

router = APIRouter()


@router.get("", response_model=SessionSnapshot)
async def get_session() -> SessionSnapshot:
    """Return the latest session snapshot."""
    return _app.controller.snapshot


@router.post("/start", response_model=SessionSnapshot)
async def start_session() -> SessionSnapshot:
    """Open a capture session.

    Returns 409 while another session is capturing.  When the decoder cannot
    start, the returned snapshot is idle and carries a ``decoder_unavailable``
    result.
    """
    try:
        return _app.controller.start()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/symbol", response_model=SessionSnapshot, status_code=202)
async def push_symbol(event: SymbolEvent) -> SessionSnapshot:
    """Deliver a decoded symbol to the open capture session.

    Symbols arriving outside a capture session are dropped.
    """
    _app.decoder.push(event.symbol, event.symbology)
    return _app.controller.snapshot


@router.post("/cancel", response_model=SessionSnapshot)
async def cancel_session() -> SessionSnapshot:
    """Cancel the current capture or discard the pending lookup."""
    return _app.controller.cancel()
