"""Tx — one transaction envelope under construction.

A Tx accumulates operations and envelope options, then signs and submits
exactly once. It runs in one of two modes:

- implicit: one operation, signed and submitted by the client right away
- multi-op: opened by ``StellarClient.start()``; operations accumulate until
  the session is submitted or its payload extracted

Once submitted (or its payload extracted) a Tx is terminal and rejects
further operations.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from stellar_sdk import Account as SdkAccount
from stellar_sdk import Keypair, TransactionBuilder
from stellar_sdk.exceptions import Ed25519SecretSeedInvalidError

from microstellar.errors.definitions import ErrEmptySession
from microstellar.errors.stellar_errors import SigningError, TxClosedError
from microstellar.horizon.models import TxResponse
from microstellar.keys import address_of, valid_seed
from microstellar.options import Options, merge_options

if TYPE_CHECKING:
    from stellar_sdk import TransactionEnvelope
    from stellar_sdk.operation import Operation

    from microstellar.config.network import CustomNetwork, PresetNetwork, SimulatedNetwork
    from microstellar.horizon.client import HorizonClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_FEE = 100
DEFAULT_TX_TIMEOUT = 300


class Tx:
    """A single transaction envelope and its lifecycle state.

    Attributes:
        operations: Operations in submission order.
        options: Envelope options (memo, signers, overrides).
        source: Envelope source as given by the caller (address or seed).
        is_multi_op: True for an explicit multi-op session.
        response: Submission result, once submitted.
        err: The error that ended the Tx, if any.
    """

    def __init__(
        self,
        network: SimulatedNetwork | PresetNetwork | CustomNetwork,
        horizon: HorizonClient | None = None,
        *,
        base_fee: int = DEFAULT_BASE_FEE,
        tx_timeout: int = DEFAULT_TX_TIMEOUT,
    ) -> None:
        self._network = network
        self._horizon = horizon
        self._base_fee = base_fee
        self._tx_timeout = tx_timeout

        self.operations: list[Operation] = []
        self.options = Options()
        self.source = ""
        self.is_multi_op = False

        self.envelope: TransactionEnvelope | None = None
        self.response: TxResponse | None = None
        self.err: Exception | None = None
        self._closed = False
        self._source_signs = False

    def __repr__(self) -> str:
        mode = "multi-op" if self.is_multi_op else "single"
        return f"Tx({mode}, ops={len(self.operations)}, closed={self._closed})"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def signed(self) -> bool:
        return self.envelope is not None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def with_options(self, options: Options | None) -> Tx:
        """Replace the envelope options; a ``multi_op`` source turns on session mode."""
        self.options = merge_options(options)
        if self.options.multi_op_source:
            self.source = self.options.multi_op_source
            self.is_multi_op = True
            # A seed source with no start signers keeps signing after ops add signers.
            self._source_signs = not self.options.signers and valid_seed(self.source)
        return self

    def set_options(self, options: Options | None) -> None:
        """Merge one call's options into the envelope options."""
        if options is not None:
            self.options.merge(options)

    def op_source(self, source: str) -> str | None:
        """Operation-level source account for an op sourced from *source*.

        ``None`` means the op inherits the envelope source.
        """
        if not self.is_multi_op:
            return None
        address = address_of(source)
        return None if address == address_of(self.source) else address

    def add(self, source: str, operation: Operation) -> None:
        """Append *operation*; the first op of an implicit Tx fixes the envelope source.

        Raises:
            TxClosedError: If the Tx is already terminal.
        """
        if self._closed or self.signed:
            raise TxClosedError
        if not self.source:
            self.source = source
        self.operations.append(operation)
        logger.debug("added %s (%d ops)", type(operation).__name__, len(self.operations))

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    def _sequence(self, address: str) -> int:
        if self.options.sequence is not None:
            return self.options.sequence
        if self._network.simulated or self._horizon is None:
            return 0
        return self._horizon.load_account(address).sequence

    def _build(self) -> TransactionEnvelope:
        if not self.operations:
            raise ErrEmptySession

        address = address_of(self.source)
        builder = TransactionBuilder(
            source_account=SdkAccount(address, self._sequence(address)),
            network_passphrase=self._network.passphrase,
            base_fee=self.options.base_fee or self._base_fee,
        )
        for op in self.operations:
            builder.append_operation(op)
        if self.options.memo is not None:
            builder.add_memo(self.options.memo.to_sdk())

        timeout = self.options.timeout if self.options.timeout is not None else self._tx_timeout
        if timeout:
            builder.set_timeout(timeout)
        else:
            builder.add_time_bounds(0, 0)
        return builder.build()

    def sign(self, *signers: str) -> None:
        """Build the envelope and sign it.

        Args:
            signers: Seeds to sign with, in order. Defaults to the option
                signers, or the envelope source when there are none. A
                session started from a seed without signers always keeps
                that seed among the defaults.

        Raises:
            SigningError: If a signer is not a valid seed.
        """
        if self._closed:
            raise TxClosedError
        envelope = self.envelope or self._build()

        seeds = list(signers) or self.options.signers_for(self.source)
        if not signers and self._source_signs and self.source not in seeds:
            seeds.insert(0, self.source)
        for seed in seeds:
            try:
                keypair = Keypair.from_secret(seed)
            except Ed25519SecretSeedInvalidError as exc:
                self.err = SigningError("parse failed: signer is not a valid seed")
                raise self.err from exc
            envelope.sign(keypair)
            logger.debug("signed by %s", keypair.public_key)

        self.envelope = envelope

    # ------------------------------------------------------------------
    # Closing
    # ------------------------------------------------------------------

    def payload(self) -> str:
        """Return the signed base64 envelope without submitting; closes the Tx."""
        if not self.signed:
            self.sign()
        self._closed = True
        return self.envelope.to_xdr()

    def submit(self) -> TxResponse:
        """Submit the signed envelope; closes the Tx whether or not it succeeds.

        Raises:
            NetworkError: On transport failure or ledger rejection.
        """
        if self._closed:
            raise TxClosedError
        if not self.signed:
            self.sign()
        self._closed = True

        envelope_xdr = self.envelope.to_xdr()
        if self._network.simulated or self._horizon is None:
            logger.debug("simulated network, skipping submission")
            self.response = TxResponse(hash=self.envelope.hash_hex(), envelope_xdr=envelope_xdr)
            return self.response

        try:
            self.response = self._horizon.submit_transaction(envelope_xdr)
        except Exception as exc:
            self.err = exc
            raise
        return self.response
