"""
Module for fetching strategies metadata (name, description, protocols)
from the yearn meta API.

Example:
    ::

        from vaultcat.metas import MetasService, MetasStore

        store = MetasStore()
        service = MetasService(store)
        service.fetch(1)
        store.get(1, "0x2b2944cf56c7ee7b3dae0a79c6db0c4a5cbd5d63")
        # => StrategyMeta({"name": "...", "addresses": [...], ...})
"""

from vaultcat.metas.strategy_meta import StrategyMeta
from vaultcat.metas.service import MetasService, MetasStore
