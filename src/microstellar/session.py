"""Multi-op session state.

A client is either ``Idle`` or ``Open`` with exactly one session. All
transitions go through :meth:`SessionMachine.transition`, so submitting
while idle or starting twice is rejected in one place.

The :class:`Session` handle returned by ``StellarClient.start()`` closes the
session explicitly::

    with client.start(source_seed, options=Options().with_memo_text("batch")) as session:
        client.pay(source_seed, bob, "10", usd)
        client.set_home_domain(source_seed, "example.com")
    # clean exit submits; an exception aborts
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from microstellar.errors.definitions import ErrNoSession, ErrSessionOpen

if TYPE_CHECKING:
    from types import TracebackType

    from microstellar.client import StellarClient
    from microstellar.horizon.models import TxResponse
    from microstellar.tx import Tx


class SessionEvent(enum.StrEnum):
    START = "start"
    CLOSE = "close"


@dataclass(frozen=True)
class Idle:
    """No session is open."""


@dataclass(frozen=True)
class Open:
    """Exactly one session is open."""

    session: Session


IDLE = Idle()


class Session:
    """Handle to an open multi-op transaction."""

    def __init__(self, client: StellarClient, tx: Tx) -> None:
        self._client = client
        self.tx = tx
        self._open = True

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"Session({state}, ops={len(self.tx.operations)})"

    @property
    def is_open(self) -> bool:
        return self._open

    def submit(self) -> TxResponse:
        """Sign and submit every queued operation as one transaction."""
        return self._client._close_session(self, submit=True)

    def payload(self) -> str:
        """Sign and return the base64 envelope without submitting it."""
        return self._client._close_session(self, submit=False)

    def abort(self) -> None:
        """Drop the session without signing or submitting."""
        self._client._abort_session(self)

    def __enter__(self) -> Session:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self._open:
            return
        if exc_type is not None:
            self._client._discard_session(self)
            return
        try:
            self.submit()
        except Exception:
            # Never leave the client open once the block is gone; last_error is kept.
            if self._open:
                self._client._discard_session(self)
            raise


class SessionMachine:
    """Owns the ``Idle | Open`` state of one client."""

    def __init__(self) -> None:
        self._state: Idle | Open = IDLE

    @property
    def state(self) -> Idle | Open:
        return self._state

    @property
    def current(self) -> Session | None:
        """The open session, or ``None`` when idle."""
        return self._state.session if isinstance(self._state, Open) else None

    def require(self, session: Session | None = None) -> Session:
        """Return the open session, checking it is *session* when one is given.

        Raises:
            SessionStateError: If idle, or *session* is not the open one.
        """
        current = self.current
        if current is None or (session is not None and session is not current):
            raise ErrNoSession
        return current

    def transition(self, event: SessionEvent, session: Session) -> None:
        """Apply *event* for *session*.

        Raises:
            SessionStateError: On START while open or CLOSE of a session that
                is not the open one.
        """
        if event == SessionEvent.START:
            if isinstance(self._state, Open):
                raise ErrSessionOpen
            self._state = Open(session)
            return

        self.require(session)
        session._open = False
        self._state = IDLE
