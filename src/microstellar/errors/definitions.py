"""Pre-defined fixed-message error instances."""

from __future__ import annotations

from microstellar.errors.stellar_errors import SessionStateError, ValidationError

# -- Session ---------------------------------------------------------------

ErrNoSession = SessionStateError("no multi-op transaction in progress, call start() first")
ErrSessionOpen = SessionStateError(
    "a multi-op transaction is already in progress", code="session-open"
)
ErrEmptySession = SessionStateError(
    "multi-op transaction has no operations", code="session-empty"
)

# -- Validation ------------------------------------------------------------

ErrEmptyDataKey = ValidationError("data key must not be empty")
ErrPathOptionsNotAllowed = ValidationError("path payment options are only valid for payments")
ErrMissingPathSource = ValidationError(
    "no path or path-search source address specified for path payment"
)
