"""
Vaultcat aggregates on-chain state of yearn vault strategies
across several networks and keeps the latest normalized result
in memory, backed by a local snapshot cache.

The pipeline is split into services:

+--------------------------------------------------+-------------------------------+
| Service                                          | Description                   |
+==================================================+===============================+
| :class:`vaultcat.calls.MulticallService`         | Batched static calls via      |
|                                                  | Multicall3                    |
+--------------------------------------------------+-------------------------------+
| :class:`vaultcat.strategies.StrategiesService`   | One aggregation pass for a    |
|                                                  | network                       |
+--------------------------------------------------+-------------------------------+
| :class:`vaultcat.strategies.StrategiesStore`     | Latest strategy records per   |
|                                                  | network, snapshot persistence |
+--------------------------------------------------+-------------------------------+
| :class:`vaultcat.metas.MetasService`             | Strategy metadata from the    |
|                                                  | meta API                      |
+--------------------------------------------------+-------------------------------+

The :mod:`vaultcat.daemon` module wires them into periodic tasks.
"""
