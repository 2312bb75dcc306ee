"""
Pair factory and registry.

The factory is a long-lived service object: it creates pairs at their
deterministic addresses, keeps the registry, owns the protocol fee switch
(`fee_to` / `fee_to_setter`) and the clock, and is injected into every pair it
creates. It also opens and closes the journal frames that make each pair
operation all-or-nothing.
"""

from __future__ import annotations

import logging
import time
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config import PairswapConfig
from ..errors import ForbiddenCallerError, PairExistsError
from ..state.assets import Asset
from ..state.balances import Address, AssetId
from ..state.canonical import canonical_address
from ..state.journal import Journal, JournalMark, default_journal
from .address import PAIR_INIT_CODE_HASH, compute_pair_address, sort_assets
from .events import PairCreated
from .pair import Pair

logger = logging.getLogger(__name__)

ClockFn = Callable[[], int]
AssetRef = Union[AssetId, Asset]


def _asset_id(asset: AssetRef) -> AssetId:
    if isinstance(asset, str):
        return canonical_address(asset, name="asset")
    return canonical_address(asset.address, name="asset")


def _wall_clock() -> int:
    return int(time.time())


class Factory:
    """
    Creates and tracks pairs.

    Attributes:
        address: Deployer identity used in pair address derivation
        init_code_hash: Content hash of the pair logic used in address derivation
        journal: Undo journal shared with the assets its pairs hold
        all_pairs: Pairs in creation order
        events: `PairCreated` events, oldest first
    """

    def __init__(
        self,
        address: Address,
        *,
        config: Optional[PairswapConfig] = None,
        clock: Optional[ClockFn] = None,
        journal: Optional[Journal] = None,
    ) -> None:
        self.address = canonical_address(address, name="factory address")
        self.config = config or PairswapConfig()
        self.init_code_hash = self.config.init_code_hash or PAIR_INIT_CODE_HASH
        self.journal = journal if journal is not None else default_journal()
        self._fee_to = self.config.fee_to
        self._fee_to_setter = self.config.fee_to_setter
        self._clock = clock or _wall_clock
        self._pairs: Dict[Tuple[AssetId, AssetId], Pair] = {}
        self._by_address: Dict[Address, Pair] = {}
        self.all_pairs: List[Pair] = []
        self.events: List[PairCreated] = []

    # -- fee switch ---------------------------------------------------------------

    @property
    def fee_to(self) -> Address:
        return self._fee_to

    @property
    def fee_to_setter(self) -> Address:
        return self._fee_to_setter

    def set_fee_to(self, caller: Address, fee_to: Address) -> None:
        """Set the protocol fee recipient; the zero address switches the fee off."""
        self._require_setter(caller)
        fee_to = canonical_address(fee_to, name="fee_to")
        self.journal.record(partial(setattr, self, "_fee_to", self._fee_to))
        self._fee_to = fee_to
        logger.info("factory %s fee_to set to %s", self.address, self._fee_to)

    def set_fee_to_setter(self, caller: Address, fee_to_setter: Address) -> None:
        self._require_setter(caller)
        fee_to_setter = canonical_address(fee_to_setter, name="fee_to_setter")
        self.journal.record(partial(setattr, self, "_fee_to_setter", self._fee_to_setter))
        self._fee_to_setter = fee_to_setter
        logger.info("factory %s fee_to_setter set to %s", self.address, self._fee_to_setter)

    def _require_setter(self, caller: Address) -> None:
        if canonical_address(caller, name="caller") != self._fee_to_setter:
            raise ForbiddenCallerError(f"{caller} is not the fee_to_setter")

    # -- clock ----------------------------------------------------------------------

    def now(self) -> int:
        return int(self._clock())

    # -- registry -------------------------------------------------------------------

    def pair_address_for(self, asset_x: AssetRef, asset_y: AssetRef) -> Address:
        return compute_pair_address(self.address, _asset_id(asset_x), _asset_id(asset_y), self.init_code_hash)

    def create_pair(self, asset_x: Asset, asset_y: Asset) -> Pair:
        """
        Deploy the pair for two assets (in either order).

        Raises:
            IdenticalAssetsError: Both arguments name the same asset
            ZeroAddressError: An asset is the zero address
            PairExistsError: The pair was already created
        """
        asset_a_id, asset_b_id = sort_assets(_asset_id(asset_x), _asset_id(asset_y))
        if (asset_a_id, asset_b_id) in self._pairs:
            raise PairExistsError(f"pair ({asset_a_id}, {asset_b_id}) already exists")
        by_id = {_asset_id(asset_x): asset_x, _asset_id(asset_y): asset_y}
        asset_a, asset_b = by_id[asset_a_id], by_id[asset_b_id]

        address = compute_pair_address(self.address, asset_a_id, asset_b_id, self.init_code_hash)
        pair = Pair(address, self, minimum_liquidity=self.config.minimum_liquidity)
        pair.initialize(self.address, asset_a, asset_b)

        self.journal.record(partial(self._unregister, pair))
        self._pairs[(asset_a_id, asset_b_id)] = pair
        self._pairs[(asset_b_id, asset_a_id)] = pair
        self._by_address[pair.address] = pair
        self.all_pairs.append(pair)
        self.events.append(
            PairCreated(asset_a=asset_a_id, asset_b=asset_b_id, pair=pair.address, index=len(self.all_pairs))
        )
        logger.info("factory %s created pair %s for (%s, %s)", self.address, pair.address, asset_a_id, asset_b_id)
        return pair

    def get_pair(self, asset_x: AssetRef, asset_y: AssetRef) -> Optional[Pair]:
        return self._pairs.get((_asset_id(asset_x), _asset_id(asset_y)))

    def pair_at(self, address: Address) -> Optional[Pair]:
        return self._by_address.get(canonical_address(address, name="address"))

    def all_pairs_length(self) -> int:
        return len(self.all_pairs)

    # -- journal frames -------------------------------------------------------------

    def checkpoint(self) -> JournalMark:
        """Open a journal frame; every journaled change after this can be undone."""
        return self.journal.begin()

    def commit(self, mark: JournalMark) -> None:
        self.journal.commit(mark)

    def rollback(self, mark: JournalMark) -> None:
        """Undo every journaled change since `mark`, in this or any other factory."""
        self.journal.rollback(mark)

    def _unregister(self, pair: Pair) -> None:
        a, b = _asset_id(pair.asset_a), _asset_id(pair.asset_b)
        self._pairs.pop((a, b), None)
        self._pairs.pop((b, a), None)
        self._by_address.pop(pair.address, None)
        self.all_pairs.remove(pair)
        del self.events[-1]

    def __repr__(self) -> str:
        return f"Factory(address={self.address}, pairs={len(self.all_pairs)}, fee_to={self._fee_to})"
