"""Tests for EAN router endpoints."""

import httpx
import pytest
from conftest import WIDGET_ITEM, lookup_response


@pytest.mark.anyio
async def test_ean_lookup_found(client, upstream):
    upstream.respond(json=lookup_response(WIDGET_ITEM))
    response = await client.get("/api/ean/012345678905")

    assert response.status_code == 200
    data = response.json()
    assert data["ean"] == "012345678905"
    assert data["brand"] == "Acme"
    assert data["lowest_recorded_price"] is None
    assert data["offers"][0]["price"] == 9.99
    assert upstream.requests[0].url.params["upc"] == "012345678905"


@pytest.mark.anyio
async def test_ean_lookup_not_found(client, upstream):
    response = await client.get("/api/ean/7310865004703")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_ean_lookup_upstream_error(client, upstream):
    upstream.respond(500)
    response = await client.get("/api/ean/7310865004703")
    assert response.status_code == 502


@pytest.mark.anyio
async def test_ean_lookup_connection_error(client, upstream):
    upstream.error = httpx.ConnectError("connection refused")
    response = await client.get("/api/ean/7310865004703")
    assert response.status_code == 502


@pytest.mark.anyio
async def test_ean_lookup_garbage_body_hides_payload(client, upstream):
    upstream.respond(text="secret internal page")
    response = await client.get("/api/ean/7310865004703")
    assert response.status_code == 502
    assert "secret internal page" not in response.text


@pytest.mark.anyio
async def test_ean_display(client, upstream):
    upstream.respond(json=lookup_response(WIDGET_ITEM))
    response = await client.get("/api/ean/012345678905/display")

    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "product"
    assert "Title: Widget" in data["description"]
    assert data["first_image"] == "http://x/1.jpg"
    assert len(data["offers"]) == 1
    assert data["offer_lines"] == [
        ["Shop: Widget", "Price: 9.99", "Shipping: Free", "Condition: New", "Link: http://shop.com/w1"]
    ]

