"""Horizon, transport and federation errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from microstellar.errors.stellar_errors import StellarError, find_cause

if TYPE_CHECKING:
    from microstellar.horizon.models import HorizonProblem


class NetworkError(StellarError):
    """Any failure talking to the ledger network."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 502,
        code: str = "network-error",
    ) -> None:
        super().__init__(message, status_code=status_code, code=code)


class TransportError(NetworkError):
    """The HTTP request never produced a Horizon response (DNS, timeout, reset)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=503, code="transport-error")


class HorizonError(NetworkError):
    """Horizon answered with a problem document.

    Attributes:
        problem: The parsed RFC 7807 problem returned by Horizon.
    """

    def __init__(
        self,
        message: str,
        *,
        problem: HorizonProblem | None = None,
        status_code: int = 502,
        code: str = "horizon-error",
    ) -> None:
        super().__init__(message, status_code=status_code, code=code)
        self.problem = problem


class LedgerError(HorizonError):
    """The transaction reached the ledger and was rejected (``tx_failed`` etc.)."""

    def __init__(self, message: str, *, problem: HorizonProblem | None = None) -> None:
        status = problem.status if problem is not None and problem.status else 400
        super().__init__(message, problem=problem, status_code=status, code="ledger-error")

    @property
    def transaction_code(self) -> str:
        """Transaction-level result code, e.g. ``tx_bad_seq``."""
        return self.problem.transaction_code if self.problem else ""

    @property
    def operation_codes(self) -> list[str]:
        """Per-operation result codes in operation order."""
        return list(self.problem.operation_codes) if self.problem else []


class FederationError(StellarError):
    """Federation address lookup failed."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="federation-error")


def error_string(err: BaseException | None) -> str:
    """Render the Horizon problem buried in *err*, falling back to ``str(err)``.

    Result codes are rendered as ``tx_failed [op_underfunded op_success]``.
    """
    if err is None:
        return ""
    horizon_err = find_cause(err, HorizonError)
    if horizon_err is None or horizon_err.problem is None:
        return str(err)
    problem = horizon_err.problem
    if problem.transaction_code:
        ops = " ".join(problem.operation_codes)
        return f"{problem.transaction_code} [{ops}]" if ops else problem.transaction_code
    return f"{problem.title}: {problem.detail}" if problem.detail else problem.title
