"""EAN/barcode product lookup endpoints."""

from fastapi import APIRouter, HTTPException

import scanlookup.app as _app
from scanlookup.models import DisplayModel, ProductRecord
from scanlookup.services.lookup import ProductLookupError
from scanlookup.services.projection import project

router = APIRouter()


async def _lookup(ean: str) -> ProductRecord:
    try:
        record = await _app.lookup_client.lookup(ean)
    except ProductLookupError as e:
        raise HTTPException(status_code=502, detail=f"Product lookup failed: {e}") from e
    if record is None:
        raise HTTPException(status_code=404, detail=f"No product found for '{ean}'")
    return record


@router.get("/{ean}", response_model=ProductRecord)
async def lookup_ean(ean: str) -> ProductRecord:
    """Look up product data by EAN/barcode.

    Returns the first UPCitemdb match, 404 when there is none and 502 when
    the product database could not be reached or answered garbage.
    """
    return await _lookup(ean)


@router.get("/{ean}/display", response_model=DisplayModel)
async def display_ean(ean: str) -> DisplayModel:
    """Look up a product and return its display projection."""
    return project(await _lookup(ean))
