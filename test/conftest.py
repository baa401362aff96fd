from fixtures.general import cache_path, conn
from fixtures.metas import session_mock
from fixtures.multicall import w3_mock
