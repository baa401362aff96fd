"""
Module for aggregating on-chain data of yearn strategies.

The main class of this module is :class:`StrategiesService`.
It runs aggregation passes over a manifest of strategies and
keeps the results in a :class:`StrategiesStore`.

Example:
    ::

        from vaultcat.strategies import Strategy, StrategiesService, StrategiesStore

        store = StrategiesStore(cache_path="cache.sqlite3")
        store.reload(1)
        service = StrategiesService.create(store, chain_id=1)
        service.run_pass(
            [
                Strategy(
                    1,
                    "0xdA816459F1AB5631232FE5e97a05BBBb94970c95",
                    "0x2B2944CF56C7eE7B3DaE0A79C6DB0c4A5cbD5D63",
                    "0.4.3",
                )
            ]
        )
        store.get(1, "0x2b2944cf56c7ee7b3dae0a79c6db0c4a5cbd5d63")
        # => StrategyData({"creditAvailable": 0, ...})
"""

from vaultcat.strategies.strategy import Strategy, load_manifest
from vaultcat.strategies.strategy_data import StrategyData
from vaultcat.strategies.decoder import decode_strategies, decode_strategy
from vaultcat.strategies.store import StrategiesStore
from vaultcat.strategies.service import StrategiesService
