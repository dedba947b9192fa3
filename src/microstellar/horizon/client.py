"""Horizon HTTP client — accounts, transaction submission, path search.

Provides a blocking HTTP client for the Horizon REST API:
- GET  /accounts/{id} — Load an account snapshot
- POST /transactions — Submit a base64 transaction envelope
- GET  /paths/strict-receive — Find conversion paths for a path payment
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from microstellar.account import Account
from microstellar.errors.network_errors import HorizonError, LedgerError, TransportError
from microstellar.horizon.models import HorizonProblem, PathRecord, TxResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from microstellar.assets import Asset

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _json_body(response: httpx.Response, operation: str) -> dict[str, Any]:
    """Decode a 200 reply as a JSON object.

    Raises:
        HorizonError: If the body is not a JSON object.
    """
    try:
        data = response.json()
    except ValueError as exc:
        raise HorizonError(f"Horizon {operation} returned a non-JSON body") from exc
    if not isinstance(data, dict):
        msg = f"Horizon {operation} returned {type(data).__name__}, expected an object"
        raise HorizonError(msg)
    return data


def _parse(parser: Callable[[dict[str, Any]], _T], data: dict[str, Any], operation: str) -> _T:
    try:
        return parser(data)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise HorizonError(f"Horizon {operation} returned a malformed body: {exc}") from exc


def _path_records(data: dict[str, Any]) -> list[PathRecord]:
    records = data.get("_embedded", {}).get("records", [])
    return [PathRecord.from_dict(r) for r in records]


class HorizonClient:
    """Blocking HTTP client for a Horizon server.

    Usage::

        horizon = HorizonClient("https://horizon-testnet.stellar.org")
        horizon.connect()
        try:
            account = horizon.load_account("GABC...")
            response = horizon.submit_transaction(envelope_xdr)
        finally:
            horizon.close()
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the Horizon client.

        Args:
            url: Horizon base URL.
            timeout: HTTP request timeout in seconds.
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        """
        self._url = url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def url(self) -> str:
        return self._url

    def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.Client(
            base_url=self._url,
            headers={"Accept": "application/json"},
            timeout=self._timeout,
            transport=self._transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load_account(self, address: str) -> Account:
        """Load the current state of an account.

        Args:
            address: Account address (``G...``).

        Returns:
            Account snapshot.

        Raises:
            HorizonError: If Horizon returns a problem (404 for unknown accounts).
            TransportError: On connection failures.
        """
        data = self._get(f"/accounts/{address}", "load_account")
        return _parse(Account.from_horizon, data, "load_account")

    def submit_transaction(self, envelope_xdr: str) -> TxResponse:
        """Submit a signed base64 transaction envelope.

        Args:
            envelope_xdr: Base64-encoded ``TransactionEnvelope``.

        Returns:
            TxResponse with the ledger the transaction landed in.

        Raises:
            LedgerError: If the ledger rejected the transaction.
            HorizonError: On other Horizon problems.
            TransportError: On connection failures.
        """
        client = self._ensure_connected()
        try:
            response = client.post("/transactions", data={"tx": envelope_xdr})
        except httpx.HTTPError as exc:
            raise TransportError(f"transaction submission failed: {exc}") from exc

        if response.status_code == 200:
            data = _json_body(response, "submit_transaction")
            result = _parse(TxResponse.from_dict, data, "submit_transaction")
            logger.info("Transaction %s included in ledger %d", result.hash, result.ledger)
            return result

        self._raise_for_status(response, "submit_transaction")
        return TxResponse()  # unreachable

    def find_paths(
        self,
        source_address: str,
        destination_asset: Asset,
        destination_amount: str,
    ) -> list[PathRecord]:
        """Find strict-receive payment paths funded from *source_address*'s assets.

        Args:
            source_address: Account whose balances may fund the payment.
            destination_asset: Asset the destination receives.
            destination_amount: Amount the destination receives.

        Returns:
            Path records in the order Horizon returned them.
        """
        params = {
            "source_account": source_address,
            "destination_amount": destination_amount,
            **destination_asset.horizon_params("destination"),
        }
        data = self._get("/paths/strict-receive", "find_paths", params=params)
        return _parse(_path_records, data, "find_paths")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(
        self,
        path: str,
        operation: str,
        *,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        client = self._ensure_connected()
        try:
            response = client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(f"Horizon {operation} failed: {exc}") from exc

        if response.status_code == 200:
            return _json_body(response, operation)

        self._raise_for_status(response, operation)
        return {}  # unreachable

    def _ensure_connected(self) -> httpx.Client:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Horizon client not connected. Call connect() first."
            raise HorizonError(msg, status_code=500)
        return self._client

    def _raise_for_status(self, response: httpx.Response, operation: str) -> None:
        """Raise a HorizonError (or LedgerError) from a non-200 response."""
        status = response.status_code
        try:
            problem = HorizonProblem.from_dict(response.json())
        except (ValueError, AttributeError):
            problem = HorizonProblem(status=status, title=response.text)
        if not problem.status:
            problem.status = status

        if problem.has_result_codes:
            ops = ", ".join(problem.operation_codes)
            message = f"transaction rejected: {problem.transaction_code}"
            if ops:
                message = f"{message} ({ops})"
            raise LedgerError(message, problem=problem)

        detail = problem.detail or problem.title or response.text
        message = f"Horizon {operation} failed ({status}): {detail}"
        raise HorizonError(message, problem=problem, status_code=status)
