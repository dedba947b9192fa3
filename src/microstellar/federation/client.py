"""Federation client — resolve ``name*domain`` addresses.

Resolution follows SEP-2:
1. Fetch ``https://<domain>/.well-known/stellar.toml``
2. Read ``FEDERATION_SERVER`` from it
3. Query ``<server>?q=<address>&type=name`` for the account ID
"""

from __future__ import annotations

import logging
import time
import tomllib

import httpx

from microstellar.errors.network_errors import FederationError
from microstellar.federation.models import FederatedAddress, FederationRecord
from microstellar.keys import valid_address

logger = logging.getLogger(__name__)

_STELLAR_TOML_PATH = "/.well-known/stellar.toml"

# stellar.toml cache TTL
_TOML_CACHE_TTL = 300  # 5 minutes


class FederationClient:
    """Blocking HTTP client for SEP-2 federation lookups.

    Usage::

        fed = FederationClient()
        fed.connect()
        try:
            record = fed.lookup_by_address("bob*example.com")
        finally:
            fed.close()
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the federation client.

        Args:
            timeout: HTTP request timeout in seconds.
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        """
        self._client: httpx.Client | None = None
        self._timeout = timeout
        self._transport = transport
        self._toml_cache: dict[str, tuple[str, float]] = {}

    def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.Client(
            timeout=self._timeout,
            follow_redirects=True,
            headers={"User-Agent": "py-microstellar/1.0"},
            transport=self._transport,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
        self._toml_cache.clear()

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    # ------------------------------------------------------------------
    # stellar.toml
    # ------------------------------------------------------------------

    def get_federation_server(self, domain: str) -> str:
        """Return the ``FEDERATION_SERVER`` URL advertised by *domain*.

        Results are cached for 5 minutes.

        Raises:
            FederationError: If stellar.toml is unreachable, malformed, or has
                no federation server.
        """
        now = time.monotonic()
        cached = self._toml_cache.get(domain)
        if cached is not None:
            server, ts = cached
            if now - ts < _TOML_CACHE_TTL:
                return server

        client = self._ensure_connected()
        url = f"https://{domain}{_STELLAR_TOML_PATH}"
        try:
            response = client.get(url)
            response.raise_for_status()
            document = tomllib.loads(response.text)
        except httpx.HTTPError as exc:
            logger.error("Failed to fetch stellar.toml for %s: %s", domain, exc)
            raise FederationError(f"could not fetch stellar.toml for {domain}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            logger.error("Malformed stellar.toml for %s: %s", domain, exc)
            raise FederationError(f"malformed stellar.toml for {domain}: {exc}") from exc

        server = document.get("FEDERATION_SERVER", "")
        if not isinstance(server, str) or not server:
            raise FederationError(f"no FEDERATION_SERVER in stellar.toml for {domain}", status_code=404)

        self._toml_cache[domain] = (server, now)
        return server

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup_by_address(self, address: str) -> FederationRecord:
        """Resolve a federation address to its record.

        Args:
            address: A ``name*domain`` federation address.

        Returns:
            The FederationRecord with a valid ``account_id``.

        Raises:
            FederationError: If the address is malformed or the lookup fails.
        """
        try:
            fed = FederatedAddress.from_string(address)
        except ValueError as exc:
            raise FederationError(str(exc), status_code=400) from exc

        server = self.get_federation_server(fed.domain)
        client = self._ensure_connected()
        try:
            response = client.get(server, params={"q": fed.address, "type": "name"})
        except httpx.HTTPError as exc:
            logger.error("Federation lookup failed for %s: %s", fed.address, exc)
            raise FederationError(f"federation lookup failed for {fed.address}: {exc}") from exc

        if response.status_code == 404:
            raise FederationError(f"federation address not found: {fed.address}", status_code=404)
        if response.status_code != 200:
            raise FederationError(
                f"federation server error ({response.status_code}) for {fed.address}"
            )

        try:
            record = FederationRecord.from_dict(response.json())
        except (ValueError, AttributeError) as exc:
            logger.error("Malformed federation reply for %s: %s", fed.address, exc)
            raise FederationError(f"malformed federation reply for {fed.address}") from exc
        if not valid_address(record.account_id):
            raise FederationError(
                f"federation server returned invalid account id: {record.account_id!r}"
            )
        return record

    def _ensure_connected(self) -> httpx.Client:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "Federation client not connected. Call connect() first."
            raise FederationError(msg, status_code=500)
        return self._client
