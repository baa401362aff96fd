import json
from threading import Lock
from typing import Any

from vaultcat.core import Core
from vaultcat.utils import json_response

# The cache connection is shared by the tasks of all networks
_lock = Lock()


class SnapshotNotFound(KeyError):
    """
    No snapshot is saved under the key for the network.
    This is the expected state on a cold start.
    """


class SnapshotsRepo(Core):
    """
    Reading and writing snapshots to database.

    A snapshot is an arbitrary json value stored under a logical key
    for a network. Saving a snapshot replaces the previous one
    under the same key.

    Important:
        Changes must be committed using :meth:`commit`, otherwise there's
        no guarantee that they're saved.
    """

    def save(self, key: str, value: Any):
        """
        Save a snapshot, replacing the previous one.

        Args:
            key: logical key of the snapshot
            value: json serializable value
        """
        with _lock:
            self.conn.execute(
                "INSERT INTO snapshots VALUES(?,?,?) "
                "ON CONFLICT(key,chain_id) DO UPDATE SET data = excluded.data",
                (key, self.chain_id, json_response(value)),
            )

    def load(self, key: str) -> Any:
        """
        Load a snapshot.

        Args:
            key: logical key of the snapshot

        Returns:
            Deserialized snapshot

        Raises:
            SnapshotNotFound: if there's no snapshot for the key
        """
        with _lock:
            row = self.conn.execute(
                "SELECT data FROM snapshots WHERE key = ? AND chain_id = ?",
                (key, self.chain_id),
            ).fetchone()
        if not row:
            raise SnapshotNotFound(f"{key} for chain {self.chain_id}")
        return json.loads(row[0])

    def commit(self):
        """
        Commits all changes pending on the database connection.
        """
        with _lock:
            self.conn.commit()

    def rollback(self):
        """
        Rollbacks all changes pending on the database connection.
        """
        with _lock:
            self.conn.rollback()

    def purge(self):
        """
        Clean all database entries of the network
        """
        with _lock:
            self.conn.execute(
                "DELETE FROM snapshots WHERE chain_id = ?", (self.chain_id,)
            )
