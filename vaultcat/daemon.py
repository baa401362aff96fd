"""
Wires the services into periodic tasks, one of each kind per network.

Start-up sequence:

    1. Restore strategy records of every network from the cache database.
    2. Start the metadata task of every network and wait until each one
       completes its first successful cycle.
    3. Start the multicall aggregation task of every network.

Run with ``vaultcat --chains 1 10 --manifest strategies.json``.
"""

from __future__ import annotations
import argparse
import logging
import time
from sqlite3 import Connection
from typing import Callable, Dict, List
import requests
from web3 import Web3

from vaultcat.constants import (
    DEFAULT_CACHE_PATH,
    META_REFRESH_INTERVAL,
    MULTICALL_REFRESH_INTERVAL,
)
from vaultcat.metas.service import MetasService, MetasStore
from vaultcat.strategies.service import StrategiesService
from vaultcat.strategies.store import StrategiesStore
from vaultcat.strategies.strategy import Strategy, load_manifest
from vaultcat.tasks import PeriodicTask

logger = logging.getLogger(__name__)

#: Returns the strategies to aggregate on a network
Manifest = Callable[[int], List[Strategy]]


class Daemon:
    """
    Runs metadata and multicall tasks for a set of networks.

    Args:
        chain_ids: networks to aggregate
        manifest: strategies source, called before every pass
        cache_path: OS path to the cache database
        meta_base_url: meta API base url
        meta_interval: seconds between two metadata refreshes
        multicall_interval: seconds between two aggregation passes
        w3: an instance of web3 shared by all networks (rpc per network by default)
        conn: an instance of database connection (overrides cache_path)
        session: http session for the meta API
    """

    chain_ids: List[int]
    strategies_store: StrategiesStore
    metas_store: MetasStore
    metas_service: MetasService
    strategies_services: Dict[int, StrategiesService]

    def __init__(
        self,
        chain_ids: List[int],
        manifest: Manifest,
        cache_path: str | None = None,
        meta_base_url: str | None = None,
        meta_interval: float = META_REFRESH_INTERVAL,
        multicall_interval: float = MULTICALL_REFRESH_INTERVAL,
        w3: Web3 | None = None,
        conn: Connection | None = None,
        session: requests.Session | None = None,
    ):
        self.chain_ids = chain_ids
        self._manifest = manifest
        self.meta_interval = meta_interval
        self.multicall_interval = multicall_interval
        self.strategies_store = StrategiesStore(cache_path=cache_path, conn=conn)
        self.metas_store = MetasStore()
        self.metas_service = MetasService(
            self.metas_store, base_url=meta_base_url, session=session
        )
        self.strategies_services = {
            chain_id: StrategiesService.create(
                self.strategies_store, chain_id=chain_id, w3=w3
            )
            for chain_id in chain_ids
        }
        self._meta_tasks: Dict[int, PeriodicTask] = {}
        self._multicall_tasks: Dict[int, PeriodicTask] = {}

    def start(self, ready_timeout: float | None = None) -> bool:
        """
        Reload cached records and start all tasks.

        Args:
            ready_timeout: max seconds to wait for the metadata tasks,
                           wait forever if ``None``

        Returns:
            ``True`` if every metadata task became ready in time.
            Multicall tasks are started either way.
        """
        for chain_id in self.chain_ids:
            self.strategies_store.reload(chain_id)

        for chain_id in self.chain_ids:
            task = PeriodicTask(
                f"metas-{chain_id}",
                self.meta_interval,
                lambda chain_id=chain_id: self.metas_service.fetch(chain_id),
            )
            self._meta_tasks[chain_id] = task
            task.start()

        all_ready = True
        deadline = None if ready_timeout is None else time.monotonic() + ready_timeout
        for task in self._meta_tasks.values():
            timeout = None if deadline is None else max(0, deadline - time.monotonic())
            if not task.ready.wait(timeout):
                logger.warning("Task %s is not ready, starting anyway", task.name)
                all_ready = False

        for chain_id in self.chain_ids:
            task = PeriodicTask(
                f"multicall-{chain_id}",
                self.multicall_interval,
                lambda chain_id=chain_id: self.run_pass(chain_id),
            )
            self._multicall_tasks[chain_id] = task
            task.start()
        return all_ready

    def run_pass(self, chain_id: int) -> bool:
        """
        Run one aggregation pass for a network with a fresh manifest.

        Args:
            chain_id: Ethereum chain_id

        Returns:
            ``True`` if the store was updated
        """
        strategies = self._manifest(chain_id)
        return self.strategies_services[chain_id].run_pass(strategies)

    def stop(self, timeout: float | None = None):
        """
        Stop all tasks, wait for them to finish and close the cache
        database and http session. Injected ``conn`` and ``session``
        are not closed.

        Args:
            timeout: max seconds to wait for each task
        """
        tasks = list(self._meta_tasks.values()) + list(self._multicall_tasks.values())
        for task in tasks:
            task.stop()
        for task in tasks:
            task.join(timeout)
        self.metas_service.close()
        self.strategies_store.close()


def file_manifest(path: str) -> Manifest:
    """
    Manifest source reading a json file before every pass
    (see :func:`vaultcat.strategies.load_manifest`).

    Args:
        path: OS path to the manifest

    Returns:
        Manifest callable
    """

    def manifest(chain_id: int) -> List[Strategy]:
        return load_manifest(path).get(chain_id, [])

    return manifest


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vaultcat", description="Aggregate yearn strategies on-chain data"
    )
    parser.add_argument(
        "--chains", type=int, nargs="+", default=[1], help="chain ids to aggregate"
    )
    parser.add_argument(
        "--manifest", required=True, help="json file with the strategies to aggregate"
    )
    parser.add_argument("--cache-path", default=DEFAULT_CACHE_PATH)
    parser.add_argument("--meta-interval", type=float, default=META_REFRESH_INTERVAL)
    parser.add_argument(
        "--multicall-interval", type=float, default=MULTICALL_REFRESH_INTERVAL
    )
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    daemon = Daemon(
        args.chains,
        file_manifest(args.manifest),
        cache_path=args.cache_path,
        meta_interval=args.meta_interval,
        multicall_interval=args.multicall_interval,
    )
    daemon.start()
    try:
        while True:
            time.sleep(60)
    except KeyboardInterrupt:
        logger.info("Stopping")
    finally:
        daemon.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
