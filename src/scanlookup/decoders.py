"""Code decoder capability and the in-process push adapter.

Frame-to-symbol decoding happens on the client device; this service only
sees the decoded symbols.  :class:`PushDecoder` is the platform adapter that
turns those pushed events into capture-session callbacks.
"""

import logging
from collections.abc import Callable, Iterable
from typing import Protocol

logger = logging.getLogger(__name__)

SymbolCallback = Callable[[str, str], None]
ErrorCallback = Callable[[Exception], None]

DEFAULT_SYMBOLOGIES = ("qr", "ean13", "ean8", "code128")


class DecoderUnavailable(Exception):
    """No capture device, permission denied, or a capture is already open."""


class CodeDecoder(Protocol):
    """A capture session that emits decoded symbols while started."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def subscribe(self, on_symbol: SymbolCallback, on_error: ErrorCallback) -> None: ...


class PushDecoder:
    """Decoder adapter fed by symbols pushed from a client device.

    Only one capture session can be open at a time.  Symbols are delivered
    to the subscriber only while the session is running and only for the
    enabled symbologies.
    """

    def __init__(self, symbologies: Iterable[str] = DEFAULT_SYMBOLOGIES, available: bool = True) -> None:
        self.symbologies = frozenset(s.lower() for s in symbologies)
        self.available = available
        self.running = False
        self._on_symbol: SymbolCallback | None = None
        self._on_error: ErrorCallback | None = None

    def subscribe(self, on_symbol: SymbolCallback, on_error: ErrorCallback) -> None:
        self._on_symbol = on_symbol
        self._on_error = on_error

    def start(self) -> None:
        if not self.available:
            raise DecoderUnavailable("no capture device available")
        if self.running:
            raise DecoderUnavailable("a capture session is already open")
        self.running = True
        logger.info("Capture session started")

    def stop(self) -> None:
        if self.running:
            logger.info("Capture session stopped")
        self.running = False
        self._on_symbol = None
        self._on_error = None

    def push(self, symbol: str, symbology: str) -> bool:
        """Deliver a decoded symbol.  Returns ``False`` when it was dropped."""
        symbology = symbology.lower()
        if not self.running or self._on_symbol is None:
            logger.debug("Dropping symbol '%s': no capture session open", symbol)
            return False
        if symbology not in self.symbologies:
            logger.debug("Dropping symbol '%s': symbology %s not enabled", symbol, symbology)
            return False
        self._on_symbol(symbol, symbology)
        return True

    def fail(self, exc: Exception) -> None:
        """Report a capture failure to the subscriber."""
        if self.running and self._on_error is not None:
            self._on_error(exc)
