"""Session controller: start capture, resolve the first symbol, publish the result.

A cycle runs ``idle -> capturing -> resolving -> idle``.  Every capture
session gets a number; callbacks and lookup tasks carry the number of the
session that created them and are ignored once it is no longer current.
"""

import asyncio
import logging
from collections.abc import Callable
from functools import partial

from scanlookup.decoders import CodeDecoder, DecoderUnavailable
from scanlookup.models import DecoderFailure, LookupFailure, NotFound, SessionSnapshot, SessionState
from scanlookup.services.lookup import ProductLookupClient, ProductLookupError
from scanlookup.services.projection import project

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[SessionSnapshot], None]


class SessionBusyError(Exception):
    """A capture session is already active."""


class SessionController:
    """Drives one scan-lookup cycle at a time.

    The current state is exposed as an immutable :class:`SessionSnapshot`
    that is replaced as a whole whenever anything changes.
    """

    def __init__(self, decoder: CodeDecoder, client: ProductLookupClient) -> None:
        self._decoder = decoder
        self._client = client
        self._snapshot = SessionSnapshot()
        self._listeners: list[SnapshotListener] = []
        self._task: asyncio.Task | None = None
        self._capture_open = False

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def state(self) -> SessionState:
        return self._snapshot.state

    def add_listener(self, listener: SnapshotListener) -> None:
        """Call *listener* with every new snapshot."""
        self._listeners.append(listener)

    def _publish(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        for listener in self._listeners:
            listener(snapshot)

    def _release(self) -> None:
        """Stop the capture session if this controller still holds it."""
        if self._capture_open:
            self._capture_open = False
            self._decoder.stop()

    def _discard_lookup(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    # ------------------------------------------------------------------
    # Caller operations
    # ------------------------------------------------------------------

    def start(self) -> SessionSnapshot:
        """Open a new capture session.

        Raises :class:`SessionBusyError` when one is already capturing.  A
        lookup still in flight from the previous cycle is discarded.
        """
        if self.state is SessionState.CAPTURING:
            raise SessionBusyError("a capture session is already active")
        self._discard_lookup()

        session = self._snapshot.session + 1
        self._publish(SessionSnapshot(state=SessionState.CAPTURING, session=session))
        self._decoder.subscribe(partial(self._on_symbol, session), partial(self._on_error, session))
        self._capture_open = True
        try:
            self._decoder.start()
        except DecoderUnavailable as e:
            logger.warning("Capture session %d could not start: %s", session, e)
            self._release()
            self._publish(
                SessionSnapshot(state=SessionState.IDLE, session=session, result=DecoderFailure(message=str(e)))
            )
        return self._snapshot

    def cancel(self) -> SessionSnapshot:
        """Abandon the current cycle, releasing the capture or dropping the lookup."""
        current = self._snapshot
        if current.state is SessionState.CAPTURING:
            self._release()
        elif current.state is SessionState.RESOLVING:
            self._discard_lookup()
        else:
            return current
        logger.info("Session %d cancelled while %s", current.session, current.state.value)
        self._publish(
            SessionSnapshot(
                state=SessionState.IDLE,
                session=current.session,
                symbol=current.symbol,
                symbology=current.symbology,
            )
        )
        return self._snapshot

    async def wait(self) -> SessionSnapshot:
        """Wait for the in-flight lookup, if any, and return the latest snapshot."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})
        return self._snapshot

    # ------------------------------------------------------------------
    # Decoder callbacks
    # ------------------------------------------------------------------

    def _is_current(self, session: int, state: SessionState) -> bool:
        return self._snapshot.session == session and self._snapshot.state is state

    def _on_symbol(self, session: int, symbol: str, symbology: str) -> None:
        if not self._is_current(session, SessionState.CAPTURING):
            logger.debug("Ignoring symbol '%s' for session %d", symbol, session)
            return
        if not symbol:
            return

        self._release()
        self._publish(
            SessionSnapshot(state=SessionState.RESOLVING, session=session, symbol=symbol, symbology=symbology)
        )
        self._task = asyncio.get_running_loop().create_task(self._resolve(session, symbol, symbology))

    def _on_error(self, session: int, exc: Exception) -> None:
        if not self._is_current(session, SessionState.CAPTURING):
            return
        logger.warning("Capture session %d failed: %s", session, exc)
        self._release()
        self._publish(
            SessionSnapshot(state=SessionState.IDLE, session=session, result=DecoderFailure(message=str(exc)))
        )

    async def _resolve(self, session: int, symbol: str, symbology: str) -> None:
        try:
            record = await self._client.lookup(symbol)
        except ProductLookupError as e:
            result = LookupFailure(kind=e.kind, message=str(e))
        except Exception:
            logger.exception("Lookup for session %d failed unexpectedly", session)
            result = LookupFailure(kind="network", message="lookup failed")
        else:
            result = project(record) if record is not None else NotFound()

        if not self._is_current(session, SessionState.RESOLVING):
            logger.debug("Discarding late result for session %d", session)
            return
        self._task = None
        self._publish(
            SessionSnapshot(
                state=SessionState.IDLE, session=session, symbol=symbol, symbology=symbology, result=result
            )
        )
