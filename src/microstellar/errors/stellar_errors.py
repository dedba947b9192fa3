"""StellarError — base exception class and local (pre-network) error kinds."""

from __future__ import annotations

import copy
from typing import Self, TypeVar

_E = TypeVar("_E", bound=BaseException)


class StellarError(Exception):
    """Base error for all microstellar operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "stellar-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def wrap(self, stage: str) -> Self:
        """Return a copy of this error whose message is prefixed with *stage*.

        The copy keeps the class, code and structured fields; raise it
        ``from`` the original so the cause stays inspectable.
        """
        wrapped = copy.copy(self)
        wrapped.message = f"{stage}: {self.message}"
        wrapped.args = (wrapped.message,)
        return wrapped


class ValidationError(StellarError):
    """Malformed input detected locally, before any network call."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=400, code="validation-error")


class SessionStateError(StellarError):
    """Multi-op session used out of order (submit while idle, double start)."""

    def __init__(self, message: str, *, code: str = "session-state") -> None:
        super().__init__(message, status_code=409, code=code)


class TxClosedError(SessionStateError):
    """An operation was appended to a transaction that is already terminal."""

    def __init__(self, message: str = "transaction is closed") -> None:
        super().__init__(message, code="tx-closed")


class PathResolutionError(StellarError):
    """The path service failed while searching for a conversion route."""

    def __init__(self, message: str, *, code: str = "path-resolution") -> None:
        super().__init__(message, status_code=502, code=code)


class PathNotFoundError(PathResolutionError):
    """The path service returned zero candidate routes."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="no-path")


class SigningError(StellarError):
    """A seed could not be parsed or the envelope could not be signed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=400, code="signing-error")


def find_cause(err: BaseException | None, kind: type[_E]) -> _E | None:
    """Walk the ``__cause__`` chain of *err* and return the first *kind* found."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, kind):
            return err
        seen.add(id(err))
        err = err.__cause__ or err.__context__
    return None
