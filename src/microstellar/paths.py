"""Path resolver — strict-receive path search for path payments.

Asks Horizon for conversion routes that deliver an exact destination amount,
then keeps only the routes that spend the requested send asset within the
maximum send amount. Ranking is left to Horizon: the order of the returned
list is the order Horizon reported, and callers take the first entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from microstellar.amount import parse_amount

if TYPE_CHECKING:
    from microstellar.assets import Asset
    from microstellar.horizon.client import HorizonClient
    from microstellar.horizon.models import PathRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Path:
    """One candidate conversion route.

    Attributes:
        source_asset: Asset debited from the sender.
        source_amount: Amount of ``source_asset`` the route needs.
        destination_asset: Asset credited to the receiver.
        destination_amount: Amount of ``destination_asset`` delivered.
        hops: Intermediate assets, in conversion order.
    """

    source_asset: Asset
    source_amount: str
    destination_asset: Asset
    destination_amount: str
    hops: list[Asset] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: PathRecord) -> Path:
        return cls(
            source_asset=record.source_asset,
            source_amount=record.source_amount,
            destination_asset=record.destination_asset,
            destination_amount=record.destination_amount,
            hops=list(record.path),
        )


def _same_asset(a: Asset, b: Asset) -> bool:
    if a.is_native or b.is_native:
        return a.is_native and b.is_native
    return a.code == b.code and a.issuer == b.issuer


class PathResolver:
    """Find conversion paths through a Horizon server."""

    def __init__(self, horizon: HorizonClient) -> None:
        self._horizon = horizon

    def find_paths(
        self,
        source_address: str,
        destination_address: str,
        destination_asset: Asset,
        destination_amount: str,
        *,
        send_asset: Asset | None = None,
        max_send: str = "",
    ) -> list[Path]:
        """Return candidate paths, best first as ranked by Horizon.

        Args:
            source_address: Account funding the payment.
            destination_address: Receiving account (logged only; strict-receive
                search is keyed on the source's balances).
            destination_asset: Asset the receiver gets.
            destination_amount: Exact amount the receiver gets.
            send_asset: Restrict results to routes spending this asset.
            max_send: Drop routes needing more than this much ``send_asset``.

        Raises:
            NetworkError: If the Horizon query fails.
        """
        logger.debug(
            "finding paths from %s to %s: %s %s",
            source_address,
            destination_address,
            destination_amount,
            destination_asset,
        )
        records = self._horizon.find_paths(source_address, destination_asset, destination_amount)
        limit = parse_amount(max_send) if max_send else None

        paths: list[Path] = []
        for record in records:
            if send_asset is not None and not _same_asset(record.source_asset, send_asset):
                continue
            if limit is not None and parse_amount(record.source_amount) > limit:
                continue
            paths.append(Path.from_record(record))

        logger.debug("found %d of %d paths", len(paths), len(records))
        return paths
