from __future__ import annotations
import logging
import sqlite3
from threading import Lock
from typing import Dict

from vaultcat.constants import STRATEGIES_SNAPSHOT_KEY
from vaultcat.snapshots.repo import SnapshotNotFound, SnapshotsRepo
from vaultcat.strategies.strategy_data import StrategyData
from vaultcat.utils import checksum

logger = logging.getLogger(__name__)


class StrategiesStore:
    """
    Latest :class:`StrategyData` of every strategy, by network and
    strategy address.

    The records of a network are always replaced all at once, so a
    reader never sees records from two different aggregation passes.

    The store is backed by :class:`vaultcat.snapshots.SnapshotsRepo`:
    :meth:`persist` saves the records of a network and :meth:`reload`
    restores them on a cold start. Persistence errors are logged
    and never raised.

    Args:
        key: logical key of the snapshots
        kwargs: Args for the :class:`vaultcat.core.Core` of the snapshots repo
                (``cache_path`` or ``conn``)
    """

    _data: Dict[int, Dict[str, StrategyData]]
    _repos: Dict[int, SnapshotsRepo]

    def __init__(self, key: str = STRATEGIES_SNAPSHOT_KEY, **kwargs):
        self.key = key
        self._kwargs = kwargs
        self._data = {}
        self._repos = {}
        self._lock = Lock()

    def replace(self, chain_id: int, records: Dict[str, StrategyData]):
        """
        Replace all records of a network.

        Args:
            chain_id: Ethereum chain_id
            records: strategy data by strategy address
        """
        snapshot = {checksum(address): data for address, data in records.items()}
        with self._lock:
            self._data[chain_id] = snapshot

    def get(self, chain_id: int, address: str) -> StrategyData | None:
        """
        Get strategy data.

        Args:
            chain_id: Ethereum chain_id
            address: strategy address in any case

        Returns:
            Strategy data or ``None`` if the strategy is unknown
        """
        with self._lock:
            snapshot = self._data.get(chain_id, {})
        return snapshot.get(checksum(address))

    def all(self, chain_id: int) -> Dict[str, StrategyData]:
        """
        All records of a network.

        Args:
            chain_id: Ethereum chain_id

        Returns:
            A copy of strategy data by strategy address
        """
        with self._lock:
            return dict(self._data.get(chain_id, {}))

    def persist(self, chain_id: int) -> bool:
        """
        Save records of a network to the cache database, replacing
        the previous snapshot.

        Args:
            chain_id: Ethereum chain_id

        Returns:
            ``True`` if the snapshot was saved
        """
        snapshot = self.all(chain_id)
        value = {address: data.to_dict() for address, data in snapshot.items()}
        repo = self._repo(chain_id)
        try:
            repo.save(self.key, value)
        except (sqlite3.Error, ValueError, TypeError):
            logger.error(
                "Could not save %s for chain %s", self.key, chain_id, exc_info=True
            )
            return False
        try:
            repo.commit()
        except sqlite3.Error:
            logger.error(
                "Could not commit %s for chain %s", self.key, chain_id, exc_info=True
            )
            # The connection is shared with other networks
            repo.rollback()
            return False
        return True

    def reload(self, chain_id: int) -> bool:
        """
        Restore records of a network from the cache database.
        The in-memory records are kept if there's no saved snapshot,
        the snapshot is empty, or it can't be read.

        Args:
            chain_id: Ethereum chain_id

        Returns:
            ``True`` if a non-empty snapshot was loaded
        """
        try:
            value = self._repo(chain_id).load(self.key)
            snapshot = {
                checksum(address): StrategyData.from_dict(data)
                for address, data in value.items()
            }
        except SnapshotNotFound:
            logger.warning("No %s found for chain %s", self.key, chain_id)
            return False
        except (sqlite3.Error, ValueError, TypeError, AttributeError):
            logger.error(
                "Could not load %s for chain %s", self.key, chain_id, exc_info=True
            )
            return False
        if len(snapshot) == 0:
            logger.warning("No %s found for chain %s", self.key, chain_id)
            return False
        with self._lock:
            self._data[chain_id] = snapshot
        logger.info("Loaded %s for chain %s", self.key, chain_id)
        return True

    def close(self):
        """
        Close the cache database connection opened by the snapshots repos
        """
        for repo in self._repos.values():
            repo.close()

    def _repo(self, chain_id: int) -> SnapshotsRepo:
        if not chain_id in self._repos:
            self._repos[chain_id] = SnapshotsRepo(chain_id=chain_id, **self._kwargs)
        return self._repos[chain_id]
