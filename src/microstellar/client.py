"""StellarClient — the user handle to the Stellar network.

Every account operation either runs as its own single-operation
transaction (signed and submitted immediately) or, between ``start()`` and
``submit()``/``payload()``, is queued into one multi-op transaction that is
applied atomically.

Seeds (secret keys) start with ``S`` and addresses (public keys) with ``G``.
Most methods take a ``source`` that signs the transaction. When an
:class:`~microstellar.options.Options` bundle supplies its own signers, the
source is not used to sign and may be a public address.

Amounts are decimal strings with at most seven fractional digits.

Failures raise a :class:`~microstellar.errors.stellar_errors.StellarError`;
the client also keeps the last error in :attr:`StellarClient.last_error`.
A handle is not thread-safe; create one per concurrent flow.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from stellar_sdk import (
    ChangeTrust,
    CreateAccount,
    Keypair,
    ManageData,
    PathPaymentStrictReceive,
    Payment,
    SetOptions,
    SetTrustLineFlags,
    Signer,
    TransactionEnvelope,
)
from stellar_sdk.operation.set_options import AuthorizationFlag
from stellar_sdk.operation.set_trust_line_flags import TrustLineFlags

from microstellar.account import Account, AccountFlags
from microstellar.amount import parse_amount
from microstellar.assets import NATIVE_ASSET, Asset
from microstellar.config.network import network_from_name, network_from_spec
from microstellar.errors.definitions import ErrEmptyDataKey, ErrEmptySession, ErrMissingPathSource
from microstellar.errors.network_errors import FederationError, NetworkError
from microstellar.errors.stellar_errors import (
    PathNotFoundError,
    PathResolutionError,
    SigningError,
    StellarError,
    ValidationError,
)
from microstellar.federation.client import FederationClient
from microstellar.federation.models import is_federated
from microstellar.horizon.client import HorizonClient
from microstellar.horizon.models import TxResponse
from microstellar.keys import (
    KeyPair,
    address_of,
    create_key_pair,
    ensure_address,
    valid_address,
    valid_address_or_seed,
)
from microstellar.options import Options, merge_options, reject_path_params
from microstellar.paths import Path, PathResolver
from microstellar.session import Session, SessionEvent, SessionMachine
from microstellar.tx import DEFAULT_BASE_FEE, DEFAULT_TX_TIMEOUT, Tx

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from stellar_sdk.operation import Operation

    from microstellar.config.network import CustomNetwork, PresetNetwork, SimulatedNetwork
    from microstellar.config.settings import ClientSettings

logger = logging.getLogger(__name__)

_P = ParamSpec("_P")
_R = TypeVar("_R")

_MAX_DATA_BYTES = 64
_MAX_HOME_DOMAIN = 32
_MAX_WEIGHT = 255


def _tracked(method: Callable[_P, _R]) -> Callable[_P, _R]:
    """Record the outcome of a public method in ``last_error``."""

    @functools.wraps(method)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        client: StellarClient = args[0]  # type: ignore[assignment]
        try:
            result = method(*args, **kwargs)
        except StellarError as exc:
            client._last_error = exc
            raise
        client._last_error = None
        return result

    return wrapper


class StellarClient:
    """User handle to a Stellar network.

    Usage::

        client = StellarClient("test")
        pair = client.create_key_pair()
        client.fund_account(funder_seed, pair.address, "10")
        client.pay(pair.seed, bob_address, "2.5", usd)

    Multi-op transactions::

        session = client.start(funder_seed, options=Options().with_memo_text("setup"))
        client.create_trust_line(funder_seed, usd, "1000")
        client.set_home_domain(funder_seed, "example.com")
        session.submit()
    """

    def __init__(
        self,
        network: str | SimulatedNetwork | PresetNetwork | CustomNetwork = "test",
        *,
        url: str | None = None,
        passphrase: str | None = None,
        settings: ClientSettings | None = None,
        horizon: HorizonClient | None = None,
        federation: FederationClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            network: ``public``, ``test``, ``simulated`` or ``custom``, or a
                prebuilt network variant.
            url: Horizon URL for ``custom``.
            passphrase: Network passphrase for ``custom``.
            settings: Timeouts and fee defaults.
            horizon: Override the Horizon client (tests inject a mock transport).
            federation: Override the federation client.

        Raises:
            ValidationError: On an unknown network or missing custom parameters.
        """
        if isinstance(network, str):
            network = network_from_name(network, url=url, passphrase=passphrase)
        self._network = network

        timeout = settings.timeout if settings is not None else 30.0
        self._base_fee = settings.base_fee if settings is not None else DEFAULT_BASE_FEE
        self._tx_timeout = settings.tx_timeout if settings is not None else DEFAULT_TX_TIMEOUT

        # The simulated network never talks to Horizon.
        self._horizon: HorizonClient | None = None if network.simulated else horizon
        if self._horizon is None and not network.simulated:
            self._horizon = HorizonClient(network.url, timeout=timeout)
        if self._horizon is not None:
            self._horizon.connect()

        self._federation = federation or FederationClient(timeout=timeout)
        self._federation.connect()

        self._sessions = SessionMachine()
        self._last_tx: Tx | None = None
        self._last_error: StellarError | None = None

    @classmethod
    def from_spec(cls, spec: str) -> StellarClient:
        """Create a client from ``"test"``, ``"public"`` or ``"custom;<url>;<passphrase>"``."""
        return cls(network_from_spec(spec))

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> StellarClient:
        """Create a client from environment/YAML settings."""
        return cls(settings.to_network(), settings=settings)

    def close(self) -> None:
        """Close the HTTP clients."""
        if self._horizon is not None:
            self._horizon.close()
        self._federation.close()

    def __enter__(self) -> StellarClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def network(self) -> SimulatedNetwork | PresetNetwork | CustomNetwork:
        return self._network

    @property
    def last_error(self) -> StellarError | None:
        """Error raised by the most recent call, ``None`` if it succeeded."""
        return self._last_error

    def err(self) -> StellarError | None:
        return self._last_error

    @property
    def last_tx(self) -> Tx | None:
        """The most recently signed, submitted or session-queued transaction."""
        return self._last_tx

    @property
    def response(self) -> TxResponse | None:
        """Response from the last submission."""
        return self._last_tx.response if self._last_tx is not None else None

    @property
    def session(self) -> Session | None:
        """The open multi-op session, if any."""
        return self._sessions.current

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------

    def _new_tx(self) -> Tx:
        return Tx(
            self._network,
            self._horizon,
            base_fee=self._base_fee,
            tx_timeout=self._tx_timeout,
        )

    def _get_tx(self) -> Tx:
        """Return the open session's Tx, or a fresh single-op Tx."""
        session = self._sessions.current
        return session.tx if session is not None else self._new_tx()

    def _run(
        self,
        source: str,
        options: Options | None,
        make_op: Callable[[str | None], Operation],
    ) -> TxResponse | None:
        """Apply options, append one operation and submit unless a session is open."""
        tx = self._get_tx()
        tx.set_options(options)
        tx.add(source, make_op(tx.op_source(source)))
        return self._sign_and_submit(tx)

    def _sign_and_submit(self, tx: Tx) -> TxResponse | None:
        self._last_tx = tx
        if tx.is_multi_op:
            return None
        tx.sign()
        return tx.submit()

    @staticmethod
    def _check_source(stage: str, source: str) -> None:
        if not valid_address_or_seed(source):
            msg = f"{stage}: invalid source address or seed: {source}"
            raise ValidationError(msg)

    @staticmethod
    def _check_asset(stage: str, asset: Asset) -> None:
        try:
            asset.validate()
        except ValidationError as exc:
            raise exc.wrap(stage) from exc

    @staticmethod
    def _check_amount(stage: str, amount: str, *, allow_zero: bool = False) -> None:
        try:
            stroops = parse_amount(amount)
        except ValidationError as exc:
            raise exc.wrap(stage) from exc
        if stroops < 0 or (stroops == 0 and not allow_zero):
            msg = f"{stage}: amount must be positive: {amount}"
            raise ValidationError(msg)

    @staticmethod
    def _check_weight(stage: str, name: str, value: int) -> None:
        if not isinstance(value, int) or not 0 <= value <= _MAX_WEIGHT:
            msg = f"{stage}: {name} must be between 0 and {_MAX_WEIGHT}: {value}"
            raise ValidationError(msg)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @_tracked
    def start(self, source: str, options: Options | None = None) -> Session:
        """Begin a multi-op transaction.

        Operations issued until ``submit()``/``payload()`` are queued into one
        transaction and applied atomically. The fee is billed to *source*,
        which signs unless *options* supplies signers. The signers must have
        authority over every queued operation.

        Raises:
            SessionStateError: If a session is already open.
            ValidationError: If *source* is invalid.
        """
        self._check_source("can't start transaction", source)
        reject_path_params(options)

        tx = self._new_tx().with_options(merge_options(options).multi_op(source))
        session = Session(self, tx)
        self._sessions.transition(SessionEvent.START, session)
        logger.info("started multi-op transaction from %s", address_of(source))
        return session

    @_tracked
    def submit(self) -> TxResponse:
        """Sign and submit the open multi-op transaction.

        Raises:
            SessionStateError: If no session is open or it has no operations.
        """
        return self._finish(self._sessions.require(), submit=True)

    @_tracked
    def payload(self) -> str:
        """Sign the open multi-op transaction and return it base64-encoded, unsubmitted.

        Closes the session like ``submit()``.
        """
        return self._finish(self._sessions.require(), submit=False)

    @_tracked
    def abort(self) -> None:
        """Discard the open multi-op transaction without signing it."""
        self._discard_session(self._sessions.require())

    @_tracked
    def _close_session(self, session: Session, *, submit: bool) -> Any:
        return self._finish(self._sessions.require(session), submit=submit)

    @_tracked
    def _abort_session(self, session: Session) -> None:
        self._discard_session(session)

    def _discard_session(self, session: Session) -> None:
        self._sessions.transition(SessionEvent.CLOSE, session)
        logger.info("aborted multi-op transaction (%d ops)", len(session.tx.operations))

    def _finish(self, session: Session, *, submit: bool) -> Any:
        tx = session.tx
        if not tx.operations:
            raise ErrEmptySession

        self._sessions.transition(SessionEvent.CLOSE, session)
        self._last_tx = tx
        logger.info("closing multi-op transaction (%d ops, submit=%s)", len(tx.operations), submit)
        if submit:
            tx.sign()
            return tx.submit()
        return tx.payload()

    # ------------------------------------------------------------------
    # Keys and accounts
    # ------------------------------------------------------------------

    @_tracked
    def create_key_pair(self) -> KeyPair:
        """Generate a new random keypair."""
        pair = create_key_pair()
        logger.debug("created address: %s, seed: <redacted>", pair.address)
        return pair

    @_tracked
    def fund_account(
        self,
        source: str,
        address_or_seed: str,
        amount: str,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Create a new account by funding it with *amount* lumens from *source*."""
        self._check_source("can't fund account", source)
        if not valid_address_or_seed(address_or_seed):
            msg = f"invalid target address or seed: {address_or_seed}"
            raise ValidationError(msg)
        self._check_amount("can't fund account", amount)
        reject_path_params(options)

        destination = address_of(address_or_seed)
        return self._run(
            source,
            options,
            lambda op_source: CreateAccount(
                destination=destination, starting_balance=amount, source=op_source
            ),
        )

    @_tracked
    def load_account(self, address: str) -> Account:
        """Load balances, signers, flags and data for *address* (or a seed's address)."""
        if not valid_address_or_seed(address):
            msg = f"can't load account: invalid address or seed: {address}"
            raise ValidationError(msg)

        account_id = address_of(address)
        if self._horizon is None:
            return Account(address=account_id)

        logger.debug("loading account: %s", account_id)
        try:
            return self._horizon.load_account(account_id)
        except NetworkError as exc:
            raise exc.wrap("could not load account") from exc

    @_tracked
    def resolve(self, address: str) -> str:
        """Resolve a federation address like ``bob*example.com`` to an account ID."""
        logger.debug("resolving: %s", address)
        if not is_federated(address):
            msg = f"not a federation address: {address}"
            raise ValidationError(msg)
        try:
            return self._federation.lookup_by_address(address).account_id
        except FederationError as exc:
            raise exc.wrap("resolve error") from exc

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    @_tracked
    def pay_native(
        self,
        source: str,
        target: str,
        amount: str,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Pay *amount* lumens from *source* to *target*."""
        return self.pay(source, target, amount, NATIVE_ASSET, options)

    @_tracked
    def pay(
        self,
        source: str,
        target: str,
        amount: str,
        asset: Asset,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Pay *amount* of *asset* from *source* to *target*.

        With ``options.with_asset(send_asset, max_amount)`` this becomes a path
        payment: the sender spends at most *max_amount* of *send_asset* and
        the receiver gets exactly *amount* of *asset*. Hops come from
        ``options.through(...)``; without them a path is searched from
        ``options.find_path_from(address)`` and the first result is used::

            client.pay(mary_seed, bob, "2000", inr,
                       options=Options().with_asset(xlm, "20").through(usd, eur))

        Raises:
            PathNotFoundError: If path search finds no route.
            PathResolutionError: If the path search itself fails.
        """
        self._check_asset("can't pay", asset)
        self._check_source("can't pay", source)
        if not valid_address_or_seed(target):
            msg = f"can't pay: invalid address: {target}"
            raise ValidationError(msg)
        self._check_amount("can't pay", amount)

        destination = address_of(target)
        hops: list[Asset] | None = None
        if options is not None and options.has_path_params:
            hops = self._resolve_hops(options, destination, asset, amount)

        def make_op(op_source: str | None) -> Operation:
            if hops is None:
                return Payment(
                    destination=destination, asset=asset.to_sdk(), amount=amount, source=op_source
                )
            return PathPaymentStrictReceive(
                destination=destination,
                send_asset=options.send_asset.to_sdk(),
                send_max=options.max_amount,
                dest_asset=asset.to_sdk(),
                dest_amount=amount,
                path=[hop.to_sdk() for hop in hops],
                source=op_source,
            )

        return self._run(source, options, make_op)

    def _resolve_hops(
        self,
        options: Options,
        destination: str,
        asset: Asset,
        amount: str,
    ) -> list[Asset]:
        """Pick the conversion path for a path payment."""
        send_asset = options.send_asset
        if send_asset is None:
            msg = "path payment requires a send asset, use Options.with_asset()"
            raise ValidationError(msg)

        logger.debug("path payment: deposit %s with %s", asset.code, send_asset.code)
        if options.path:
            for hop in options.path:
                logger.debug("path payment: through %s", hop.code)
            return list(options.path)

        logger.debug("no path specified, searching for paths from: %s", options.source_address)
        if not options.source_address:
            raise ErrMissingPathSource
        try:
            ensure_address(options.source_address)
        except ValidationError as exc:
            raise exc.wrap("path search source") from exc

        try:
            paths = self._find_paths(
                options.source_address,
                destination,
                asset,
                amount,
                send_asset=send_asset,
                max_send=options.max_amount,
            )
        except NetworkError as exc:
            msg = f"path finding error: {exc}"
            raise PathResolutionError(msg) from exc

        if not paths:
            msg = f"no paths found from {send_asset.code} to {asset.code}"
            raise PathNotFoundError(msg)

        for hop in paths[0].hops:
            logger.debug("path payment: through %s", hop.code)
        return list(paths[0].hops)

    def _find_paths(
        self,
        source_address: str,
        destination: str,
        asset: Asset,
        amount: str,
        *,
        send_asset: Asset | None,
        max_send: str,
    ) -> list[Path]:
        if self._horizon is None:
            logger.debug("simulated network, no paths available")
            return []
        return PathResolver(self._horizon).find_paths(
            source_address,
            destination,
            asset,
            amount,
            send_asset=send_asset,
            max_send=max_send,
        )

    @_tracked
    def find_paths(
        self,
        source_address: str,
        target: str,
        asset: Asset,
        amount: str,
        options: Options | None = None,
    ) -> list[Path]:
        """Find routes that deliver *amount* of *asset* to *target*.

        ``options.with_asset(send_asset, max_amount)`` restricts the results to
        routes spending *send_asset*, within *max_amount*.
        """
        if not valid_address(source_address):
            msg = f"can't find paths: invalid source address: {source_address}"
            raise ValidationError(msg)
        if not valid_address_or_seed(target):
            msg = f"can't find paths: invalid target address: {target}"
            raise ValidationError(msg)
        self._check_asset("can't find paths", asset)
        self._check_amount("can't find paths", amount)

        send_asset = options.send_asset if options is not None else None
        max_send = options.max_amount if options is not None else ""
        try:
            return self._find_paths(
                source_address,
                address_of(target),
                asset,
                amount,
                send_asset=send_asset,
                max_send=max_send,
            )
        except NetworkError as exc:
            msg = f"path finding error: {exc}"
            raise PathResolutionError(msg) from exc

    # ------------------------------------------------------------------
    # Trust lines
    # ------------------------------------------------------------------

    @_tracked
    def create_trust_line(
        self,
        source: str,
        asset: Asset,
        limit: str = "",
        options: Options | None = None,
    ) -> TxResponse | None:
        """Trust *asset* from *source*, up to *limit* (empty for no limit)."""
        self._check_source("can't create trust line", source)
        self._check_asset("can't create trust line", asset)
        if asset.is_native:
            msg = "can't create trust line: native asset needs no trust line"
            raise ValidationError(msg)
        if limit:
            self._check_amount("can't create trust line", limit)
        reject_path_params(options)

        return self._run(
            source,
            options,
            lambda op_source: ChangeTrust(
                asset=asset.to_sdk(), limit=limit or None, source=op_source
            ),
        )

    @_tracked
    def remove_trust_line(
        self,
        source: str,
        asset: Asset,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Remove *source*'s trust line to *asset*; its balance must be zero."""
        self._check_source("can't remove trust line", source)
        self._check_asset("can't remove trust line", asset)
        if asset.is_native:
            msg = "can't remove trust line: native asset has no trust line"
            raise ValidationError(msg)
        reject_path_params(options)

        return self._run(
            source,
            options,
            lambda op_source: ChangeTrust(asset=asset.to_sdk(), limit="0", source=op_source),
        )

    @_tracked
    def allow_trust(
        self,
        source: str,
        address: str,
        asset_code: str,
        authorized: bool,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Authorize (or deauthorize) *address*'s trust line to an asset issued by *source*.

        Used by issuers with ``AUTH_REQUIRED``; deauthorizing needs ``AUTH_REVOCABLE``.
        """
        self._check_source("can't authorize trust line", source)
        try:
            ensure_address(address)
        except ValidationError as exc:
            raise exc.wrap("can't authorize trust line") from exc
        asset = Asset.credit(asset_code, address_of(source))
        self._check_asset("can't authorize trust line", asset)
        reject_path_params(options)

        flag = TrustLineFlags.AUTHORIZED_FLAG
        return self._run(
            source,
            options,
            lambda op_source: SetTrustLineFlags(
                trustor=address,
                asset=asset.to_sdk(),
                set_flags=flag if authorized else None,
                clear_flags=None if authorized else flag,
                source=op_source,
            ),
        )

    # ------------------------------------------------------------------
    # Account options
    # ------------------------------------------------------------------

    def _set_options(
        self,
        stage: str,
        source: str,
        options: Options | None,
        **fields: Any,
    ) -> TxResponse | None:
        self._check_source(stage, source)
        reject_path_params(options)
        return self._run(
            source,
            options,
            lambda op_source: SetOptions(source=op_source, **fields),
        )

    @_tracked
    def set_master_weight(
        self, source: str, weight: int, options: Options | None = None
    ) -> TxResponse | None:
        """Change the weight of *source*'s master key; 0 disables it."""
        self._check_weight("can't set master weight", "weight", weight)
        return self._set_options("can't set master weight", source, options, master_weight=weight)

    @_tracked
    def set_flags(
        self, source: str, flags: AccountFlags, options: Options | None = None
    ) -> TxResponse | None:
        """Set issuer *flags* on *source*'s account."""
        return self._set_options(
            "can't set flags", source, options, set_flags=AuthorizationFlag(int(flags))
        )

    @_tracked
    def clear_flags(
        self, source: str, flags: AccountFlags, options: Options | None = None
    ) -> TxResponse | None:
        """Clear issuer *flags* on *source*'s account."""
        return self._set_options(
            "can't clear flags", source, options, clear_flags=AuthorizationFlag(int(flags))
        )

    @_tracked
    def set_home_domain(
        self, source: str, domain: str, options: Options | None = None
    ) -> TxResponse | None:
        """Set the home domain of *source*'s account."""
        if len(domain.encode("utf-8")) > _MAX_HOME_DOMAIN:
            msg = f"can't set home domain: domain must be at most {_MAX_HOME_DOMAIN} bytes"
            raise ValidationError(msg)
        return self._set_options("can't set home domain", source, options, home_domain=domain)

    @_tracked
    def add_signer(
        self,
        source: str,
        signer_address: str,
        signer_weight: int,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Add *signer_address* to *source*'s signers with *signer_weight*."""
        if not valid_address_or_seed(signer_address):
            msg = f"can't add signer: invalid signer address or seed: {signer_address}"
            raise ValidationError(msg)
        self._check_weight("can't add signer", "signer weight", signer_weight)
        signer = Signer.ed25519_public_key(address_of(signer_address), signer_weight)
        return self._set_options("can't add signer", source, options, signer=signer)

    @_tracked
    def remove_signer(
        self,
        source: str,
        signer_address: str,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Remove *signer_address* from *source*'s signers."""
        if not valid_address_or_seed(signer_address):
            msg = f"can't remove signer: invalid signer address or seed: {signer_address}"
            raise ValidationError(msg)
        signer = Signer.ed25519_public_key(address_of(signer_address), 0)
        return self._set_options("can't remove signer", source, options, signer=signer)

    @_tracked
    def set_thresholds(
        self,
        source: str,
        low: int,
        medium: int,
        high: int,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Set the low / medium / high signing thresholds of *source*'s account."""
        for name, value in (("low", low), ("medium", medium), ("high", high)):
            self._check_weight("can't set thresholds", f"{name} threshold", value)
        return self._set_options(
            "can't set thresholds",
            source,
            options,
            low_threshold=low,
            med_threshold=medium,
            high_threshold=high,
        )

    # ------------------------------------------------------------------
    # Data entries
    # ------------------------------------------------------------------

    @_tracked
    def set_data(
        self,
        source: str,
        key: str,
        value: bytes,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Attach (or update) a data entry; key and value are at most 64 bytes each."""
        self._check_source("can't set data", source)
        if not key:
            raise ErrEmptyDataKey
        if len(key.encode("utf-8")) > _MAX_DATA_BYTES:
            msg = f"data key must be at most {_MAX_DATA_BYTES} bytes: {key}"
            raise ValidationError(msg)
        if len(value) > _MAX_DATA_BYTES:
            msg = f"data value must be at most {_MAX_DATA_BYTES} bytes"
            raise ValidationError(msg)
        reject_path_params(options)

        return self._run(
            source,
            options,
            lambda op_source: ManageData(data_name=key, data_value=value, source=op_source),
        )

    @_tracked
    def clear_data(
        self,
        source: str,
        key: str,
        options: Options | None = None,
    ) -> TxResponse | None:
        """Remove the data entry *key* from *source*'s account."""
        self._check_source("can't clear data", source)
        if not key:
            raise ErrEmptyDataKey
        if len(key.encode("utf-8")) > _MAX_DATA_BYTES:
            msg = f"data key must be at most {_MAX_DATA_BYTES} bytes: {key}"
            raise ValidationError(msg)
        reject_path_params(options)

        return self._run(
            source,
            options,
            lambda op_source: ManageData(data_name=key, data_value=None, source=op_source),
        )

    # ------------------------------------------------------------------
    # Raw envelopes
    # ------------------------------------------------------------------

    @_tracked
    def sign_transaction(self, b64_tx: str, *seeds: str) -> str:
        """Add signatures from *seeds*, in order, to a base64 transaction envelope."""
        passphrase = self._network.passphrase
        try:
            envelope = TransactionEnvelope.from_xdr(b64_tx, passphrase)
        except Exception as exc:
            msg = f"decode failed: {exc}"
            raise SigningError(msg) from exc

        try:
            tx_hash = envelope.hash()
        except Exception as exc:
            msg = f"hash failed: {exc}"
            raise SigningError(msg) from exc

        for seed in seeds:
            try:
                keypair = Keypair.from_secret(seed)
            except Exception as exc:
                msg = "parse failed: signer is not a valid seed"
                raise SigningError(msg) from exc
            try:
                signature = keypair.sign_decorated(tx_hash)
            except Exception as exc:
                msg = f"sign failed: {exc}"
                raise SigningError(msg) from exc
            logger.debug("adding signature from %s", keypair.public_key)
            envelope.signatures.append(signature)

        try:
            return envelope.to_xdr()
        except Exception as exc:
            msg = f"could not marshal transaction: {exc}"
            raise SigningError(msg) from exc

    @_tracked
    def submit_transaction(self, b64_tx: str) -> TxResponse:
        """Submit a base64 transaction envelope as-is."""
        if self._horizon is None:
            logger.debug("simulated network, skipping submission")
            return TxResponse(envelope_xdr=b64_tx)
        return self._horizon.submit_transaction(b64_tx)
