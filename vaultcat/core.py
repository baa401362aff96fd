"""
Implements :class:`Core` that is used in other modules.
"""

import os
from sqlite3 import Connection
from functools import cached_property
from web3 import Web3

from vaultcat.constants import DEFAULT_MAX_BATCH_SIZE, MAX_BATCH_SIZE_BY_CHAIN
from vaultcat.db import connection_from_path

web3_cache = {}
db_cache = {}
chain_id_cache = {}


class Core:
    """
    A base class for any class that wants to use
    an Ethereum RPC or Sqlite3 cache database for a single network.

    When deriving this class, you're providing arguments like rpc url
    or OS path to the database. The resources are instantiated
    on demand though. It means that if you're just using the snapshot
    cache it's sufficient to supply only the ``chain_id`` and the
    OS path to the database and skip the rpc.

    So this class is lightweight and safe to derive from any other
    class.

    **Caching**

    The web3 instance and chain_id are cached by the rpc url key.
    The sqlite3 connection is cached by the OS path of the database.

    **Environment**

    +---------------------------------+-------------------------------------------+
    | Variable                        | Description                               |
    +=================================+===========================================+
    | ``VAULTCAT_RPC_URI_<chain_id>`` | Rpc url for a specific network            |
    +---------------------------------+-------------------------------------------+
    | ``WEB3_PROVIDER_URI``           | Rpc url used when the one above is absent |
    +---------------------------------+-------------------------------------------+
    | ``VAULTCAT_CACHE_PATH``         | OS path to the cache database             |
    +---------------------------------+-------------------------------------------+
    | ``VAULTCAT_MAX_BATCH_SIZE``     | Max number of calls in one multicall      |
    +---------------------------------+-------------------------------------------+

    Args:
        chain_id: Ethereum chain_id (queried from rpc if omitted)
        rpc: An https Ethereum RPC endpoint uri
        cache_path: OS path to the cache database
        max_batch_size: Max number of calls in one multicall
        w3: an instance of web3 (overrides rpc)
        conn: an instance of database connection (overrides cache_path)
    """

    #: An https Ethereum RPC endpoint uri.
    #: Can be ``None`` if :class:`web3.Web3` is injected directly.
    rpc: str | None
    #: OS path to the cache database.
    #: Can be ``None`` if :class:`sqlite3.Connection` is injected directly.
    cache_path: str | None

    def __init__(
        self,
        chain_id: int | None = None,
        rpc: str | None = None,
        cache_path: str | None = None,
        max_batch_size: int | None = None,
        w3: Web3 | None = None,
        conn: Connection | None = None,
    ):
        self._chain_id = chain_id
        self.rpc = rpc
        self.cache_path = cache_path
        self._max_batch_size = max_batch_size
        self._w3 = w3
        self._conn = conn

    @cached_property
    def chain_id(self) -> int:
        """
        Chain id of the network, queried from the web3 connection if not set
        """
        if not self._chain_id is None:
            return self._chain_id

        if not self.rpc:
            return self.w3.eth.chain_id

        if not self.rpc in chain_id_cache:
            chain_id_cache[self.rpc] = self.w3.eth.chain_id

        return chain_id_cache[self.rpc]

    @cached_property
    def max_batch_size(self) -> int:
        """
        Max number of calls sent in one multicall
        """
        if not self._max_batch_size is None:
            return self._max_batch_size
        env_value = os.environ.get("VAULTCAT_MAX_BATCH_SIZE")
        if not env_value is None:
            return int(env_value)
        return MAX_BATCH_SIZE_BY_CHAIN.get(self.chain_id, DEFAULT_MAX_BATCH_SIZE)

    @cached_property
    def w3(self) -> Web3:
        """
        :class:`web3.Web3` instance for working with Ethereum RPC
        """
        if not self._w3 is None:
            return self._w3

        if self.rpc is None and not self._chain_id is None:
            self.rpc = os.environ.get(f"VAULTCAT_RPC_URI_{self._chain_id}")

        if self.rpc is None:
            self.rpc = os.environ.get("WEB3_PROVIDER_URI")

        if self.rpc is None:
            raise ValueError(
                "Ethereum RPC is not set. "
                "Use `VAULTCAT_RPC_URI_<chain_id>` or `WEB3_PROVIDER_URI` "
                "env variable or pass rpc explicitly"
            )

        if not self.rpc in web3_cache:
            web3_cache[self.rpc] = Web3(Web3.HTTPProvider(self.rpc))

        return web3_cache[self.rpc]

    @cached_property
    def conn(self) -> Connection:
        """
        :class:`sqlite3.Connection` to a database cache
        """
        if not self._conn is None:
            return self._conn

        if self.cache_path is None:
            self.cache_path = os.environ.get("VAULTCAT_CACHE_PATH")

        if self.cache_path is None:
            raise ValueError(
                "Cache database path is not set. "
                "Use `VAULTCAT_CACHE_PATH` env variable or pass cache_path explicitly"
            )

        if not self.cache_path in db_cache:
            db_cache[self.cache_path] = connection_from_path(self.cache_path)

        return db_cache[self.cache_path]

    def close(self):
        """
        Close the database connection if this instance opened it.
        An injected connection is left to its owner.
        """
        if not self._conn is None or not "conn" in self.__dict__:
            return
        conn = self.__dict__.pop("conn")
        db_cache.pop(self.cache_path, None)
        conn.close()
