"""
Defaults for the aggregation daemon.
Every value here can be overridden with a constructor argument
and most of them with an environment variable (see :class:`vaultcat.core.Core`).
"""

import sys

#: Multicall3 is deployed at the same address on all major EVM chains
MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"

#: Maximum number of calls in one multicall for chains whose
#: rpc providers limit request size
MAX_BATCH_SIZE_BY_CHAIN = {1: 50}
#: Batch size for every other chain
DEFAULT_MAX_BATCH_SIZE = sys.maxsize

#: Base url of the yearn meta API, chain id is appended
META_BASE_URL = "https://meta.yearn.network/api/"
#: Timeout of a single meta API request, in seconds
META_REQUEST_TIMEOUT = 30

#: Seconds between two metadata refreshes
META_REFRESH_INTERVAL = 60
#: Seconds between two multicall aggregation passes
MULTICALL_REFRESH_INTERVAL = 5 * 60

#: Logical key of the strategies snapshot in the cache database
STRATEGIES_SNAPSHOT_KEY = "StrategiesMultiCallData"

DEFAULT_CACHE_PATH = "cache.sqlite3"
