"""Product lookup service: wraps the UPCitemdb ``/lookup`` endpoint.

One call is one HTTP round trip: no retries and no caching.  The first item
of the response is returned as-is; UPCitemdb already ranks its candidates.
"""

import logging

import httpx
from pydantic import ValidationError

from scanlookup.models import LookupResponse, ProductRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.upcitemdb.com/prod/trial"
DEFAULT_TIMEOUT = 10.0


class ProductLookupError(Exception):
    """Base class for lookup failures."""

    kind = "network"


class LookupNetworkError(ProductLookupError):
    """Transport failure or non-2xx answer from the product database."""

    kind = "network"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LookupDecodeError(ProductLookupError):
    """The product database answered 2xx with a body we could not decode."""

    kind = "decode"


class ProductLookupClient:
    """Async client for the UPCitemdb lookup API.

    Args:
        base_url:  API root, e.g. ``https://api.upcitemdb.com/prod/trial``.
        api_key:   Paid-plan key, sent as the ``user_key`` header when set.
        timeout:   Request timeout in seconds.
        transport: Optional httpx transport, used by tests to stub upstream.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["user_key"] = self.api_key
            headers["key_type"] = "3scale"
        return headers

    async def lookup(self, symbol: str) -> ProductRecord | None:
        """Look up a product by scanned symbol.

        Returns the first matching :class:`ProductRecord`, or ``None`` when
        the database has no match.  Raises :class:`LookupNetworkError` or
        :class:`LookupDecodeError` on failure.
        """
        if not symbol:
            raise ValueError("symbol must be a non-empty string")

        url = f"{self.base_url}/lookup"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=self._headers(), transport=self._transport
            ) as client:
                response = await client.get(url, params={"upc": symbol})
                response.raise_for_status()
        except httpx.InvalidURL as e:
            logger.warning("Cannot build UPCitemdb request for symbol of length %d: %s", len(symbol), e)
            raise LookupNetworkError(f"invalid lookup request: {e}") from e
        except httpx.TimeoutException as e:
            logger.warning("UPCitemdb lookup timed out for '%s': %s", symbol, e)
            raise LookupNetworkError(f"lookup timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("UPCitemdb lookup for '%s' returned HTTP %s", symbol, status)
            raise LookupNetworkError(f"product database returned HTTP {status}", status_code=status) from e
        except httpx.HTTPError as e:
            logger.warning("UPCitemdb lookup failed for '%s': %s", symbol, e)
            raise LookupNetworkError(f"lookup failed: {e}") from e

        try:
            envelope = LookupResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning("Undecodable UPCitemdb response for '%s' (%d errors)", symbol, e.error_count())
            logger.debug("Raw UPCitemdb response for '%s': %r", symbol, response.text)
            raise LookupDecodeError("unexpected response from product database") from e

        if not envelope.items:
            logger.info("No product found for '%s' (code=%s)", symbol, envelope.code)
            return None
        return envelope.items[0]
