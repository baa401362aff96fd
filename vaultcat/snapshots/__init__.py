"""
Durable snapshots of in-memory state, one per logical key and network.

Example:
    ::

        from vaultcat.snapshots import SnapshotNotFound, SnapshotsRepo

        repo = SnapshotsRepo(chain_id=1, cache_path="cache.sqlite3")
        repo.save("StrategiesMultiCallData", {"0x...": {...}})
        repo.commit()
        try:
            snapshot = repo.load("StrategiesMultiCallData")
        except SnapshotNotFound:
            snapshot = {}
"""

from vaultcat.snapshots.repo import SnapshotNotFound, SnapshotsRepo
