from __future__ import annotations
import logging
import os
from functools import cached_property
from threading import Lock
from typing import Dict
import requests

from vaultcat.constants import META_BASE_URL, META_REQUEST_TIMEOUT
from vaultcat.metas.strategy_meta import StrategyMeta
from vaultcat.utils import checksum

logger = logging.getLogger(__name__)


class MetasStore:
    """
    Latest :class:`StrategyMeta` by network and strategy address
    (checksummed). New records are merged into the network map, so an
    address missing from a later payload keeps its last known metadata.
    """

    _data: Dict[int, Dict[str, StrategyMeta]]

    def __init__(self):
        self._data = {}
        self._lock = Lock()

    def merge(self, chain_id: int, metas: Dict[str, StrategyMeta]):
        """
        Add or overwrite records of a network.
        Readers see either the previous map or the merged one.

        Args:
            chain_id: Ethereum chain_id
            metas: metadata by checksummed strategy address
        """
        with self._lock:
            merged = dict(self._data.get(chain_id, {}))
            merged.update(metas)
            self._data[chain_id] = merged

    def get(self, chain_id: int, address: str) -> StrategyMeta | None:
        """
        Get strategy metadata.

        Args:
            chain_id: Ethereum chain_id
            address: strategy address in any case

        Returns:
            Metadata or ``None`` if the strategy is unknown
        """
        with self._lock:
            metas = self._data.get(chain_id, {})
        return metas.get(checksum(address))

    def all(self, chain_id: int) -> Dict[str, StrategyMeta]:
        """
        A copy of all records of a network
        """
        with self._lock:
            return dict(self._data.get(chain_id, {}))


class MetasService:
    """
    Service for fetching strategies metadata from the yearn meta API.

    Every :meth:`fetch` downloads the full list of strategies of a network
    and merges it into the network records of :class:`MetasStore`.
    A failed download leaves the previous records untouched.

    Args:
        store: store for the metadata
        base_url: meta API base url, ``VAULTCAT_META_BASE_URL`` env variable
                  or :const:`vaultcat.constants.META_BASE_URL` by default
        session: http session
        timeout: request timeout in seconds
    """

    _store: MetasStore
    _session: requests.Session

    def __init__(
        self,
        store: MetasStore,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = META_REQUEST_TIMEOUT,
    ):
        self._store = store
        self._base_url = base_url
        self._owns_session = session is None
        self._session = session or requests.Session()
        self.timeout = timeout

    @cached_property
    def base_url(self) -> str:
        """
        Meta API base url, ending with ``/``
        """
        url = self._base_url or os.environ.get("VAULTCAT_META_BASE_URL", META_BASE_URL)
        return url if url.endswith("/") else f"{url}/"

    def url(self, chain_id: int) -> str:
        """
        Url of the strategies list for a network
        """
        return f"{self.base_url}{chain_id}/strategies/all"

    def fetch(self, chain_id: int) -> bool:
        """
        Fetch strategies metadata for a network and index it by address.

        Args:
            chain_id: Ethereum chain_id

        Returns:
            ``True`` if the store was updated
        """
        try:
            response = self._session.get(self.url(chain_id), timeout=self.timeout)
            response.raise_for_status()
            items = response.json()
        except requests.RequestException:
            logger.error(
                "Chain %s: error fetching strategies from the meta API",
                chain_id,
                exc_info=True,
            )
            return False
        except ValueError:
            logger.error(
                "Chain %s: error parsing strategies from the meta API",
                chain_id,
                exc_info=True,
            )
            return False
        if not isinstance(items, list):
            logger.error(
                "Chain %s: expected a list of strategies from the meta API, got %s",
                chain_id,
                type(items).__name__,
            )
            return False

        metas = {}
        for item in items:
            try:
                meta = StrategyMeta.from_dict(item)
            except (KeyError, TypeError, AttributeError):
                logger.warning("Chain %s: skipping strategy meta %s", chain_id, item)
                continue
            for address in meta.addresses:
                try:
                    metas[checksum(address)] = meta
                except ValueError:
                    logger.warning(
                        "Chain %s: invalid address `%s` in strategy meta `%s`",
                        chain_id,
                        address,
                        meta.name,
                    )
        self._store.merge(chain_id, metas)
        logger.info("Chain %s: loaded %s strategy metas", chain_id, len(metas))
        return True

    def close(self):
        """
        Close the http session if it was created by the service
        """
        if self._owns_session:
            self._session.close()
