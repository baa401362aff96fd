from __future__ import annotations
import logging
from typing import List

from vaultcat.calls.builder import build_calls
from vaultcat.calls.service import BatchError, MulticallService
from vaultcat.strategies.decoder import decode_strategies
from vaultcat.strategies.store import StrategiesStore
from vaultcat.strategies.strategy import Strategy

logger = logging.getLogger(__name__)


class StrategiesService:
    """
    Service running aggregation passes for the strategies of a network.

    **Request/Response flow**

    ::

                   +-------------------+ +------------------+ +-----------------+
                   | StrategiesService | | MulticallService | | StrategiesStore |
                   +-------------------+ +------------------+ +-----------------+
        -----------------  |                       |                    |
        | Strategies     |-|                       |                    |
        |----------------| |                       |                    |
                           |                       |                    |
                           | Build calls           |                    |
                           |-------------          |                    |
                           |            |          |                    |
                           |<------------          |                    |
                           |                       |                    |
                           | Execute in batches    |                    |
                           |---------------------->|                    |
                           |                       |                    |
                           | Decode results        |                    |
                           |---------------        |                    |
                           |              |        |                    |
                           |<--------------        |                    |
                           |                       |                    |
                           | Replace and persist network records        |
                           |------------------------------------------->|
                           |                       |                    |

    Args:
        multicall_service: multicall service of the network
        store: store for the results
    """

    _multicall_service: MulticallService
    _store: StrategiesStore

    def __init__(self, multicall_service: MulticallService, store: StrategiesStore):
        self._multicall_service = multicall_service
        self._store = store

    @staticmethod
    def create(store: StrategiesStore, **kwargs) -> StrategiesService:
        """
        Create an instance of :class:`StrategiesService`

        Args:
            store: store for the results
            kwargs: Args for the :class:`vaultcat.core.Core`

        Returns:
            An instance of :class:`StrategiesService`
        """
        multicall_service = MulticallService.create(**kwargs)
        return StrategiesService(multicall_service, store)

    @property
    def chain_id(self) -> int:
        """
        Ethereum chain_id of the network
        """
        return self._multicall_service.chain_id

    def run_pass(self, strategies: List[Strategy]) -> bool:
        """
        Fetch on-chain data for the strategies, then replace and persist
        the records of the network.

        If the multicall fails, the pass is abandoned and the store
        keeps the records of the previous pass.

        Args:
            strategies: manifest of strategies for this pass

        Returns:
            ``True`` if the store was updated
        """
        calls = build_calls(strategies)
        if len(calls) == 0:
            logger.warning("Chain %s: no strategies, nothing to do", self.chain_id)
            return False

        try:
            results = self._multicall_service.execute(calls)
        except BatchError:
            logger.error(
                "Chain %s: strategies multicall failed", self.chain_id, exc_info=True
            )
            return False

        records = decode_strategies(strategies, results)
        self._store.replace(self.chain_id, records)
        self._store.persist(self.chain_id)
        logger.info(
            "Chain %s: updated %s strategies from %s calls",
            self.chain_id,
            len(records),
            len(calls),
        )
        return True
