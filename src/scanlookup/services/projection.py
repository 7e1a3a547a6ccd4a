"""Projection of product records into display models."""

from scanlookup.models import DisplayModel, Offer, ProductRecord


def _price(value: float, currency: str | None) -> str:
    return f"{currency} {value}" if currency else f"{value}"


def format_details(record: ProductRecord) -> str:
    """Render the multi-line product description shown under the scanned code.

    Optional fields that are missing (or empty) are left out entirely.
    """
    lines = [
        f"Title: {record.title}",
        f"Brand: {record.brand}",
        f"Model: {record.model}",
        f"UPC: {record.upc or 'N/A'}",
        f"EAN: {record.ean}",
        f"Description: {record.description}",
    ]
    if record.dimension:
        lines.append(f"Dimension: {record.dimension}")
    lines.append(f"Weight: {record.weight}")
    if record.category:
        lines.append(f"Category: {record.category}")
    if record.currency:
        lines.append(f"Currency: {record.currency}")
    if record.lowest_recorded_price is not None:
        lines.append(f"Lowest Recorded Price: {_price(record.lowest_recorded_price, record.currency)}")
    if record.highest_recorded_price is not None:
        lines.append(f"Highest Recorded Price: {_price(record.highest_recorded_price, record.currency)}")
    return "\n".join(lines) + "\n"


def format_offer(offer: Offer) -> list[str]:
    """Render one offer as display lines."""
    price = f"Price: {offer.price:.2f}"
    if offer.currency:
        price += f" {offer.currency}"
    lines = [f"{offer.merchant}: {offer.title}", price]
    if offer.shipping:
        lines.append(f"Shipping: {offer.shipping}")
    lines.append(f"Condition: {offer.condition}")
    lines.append(f"Link: {offer.link}")
    return lines


def project(record: ProductRecord) -> DisplayModel:
    """Map a product record to the subset needed for display."""
    first_image = record.images[0] if record.images else None
    offers = record.offers or ()
    return DisplayModel(
        description=format_details(record),
        first_image=first_image or None,
        offers=offers,
        offer_lines=tuple(tuple(format_offer(offer)) for offer in offers),
    )
