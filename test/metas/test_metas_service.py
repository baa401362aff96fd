import pytest
import requests

from fixtures.metas import ResponseMock, SessionMock
from vaultcat.metas import MetasService, MetasStore, StrategyMeta

STRATEGY = "0x2B2944CF56C7eE7B3DaE0A79C6DB0c4A5cbD5D63"
OTHER = "0x0000000000000000000000000000000000000001"

CURVE_META = {
    "name": "Curve Boosted",
    "description": "Supplies to Curve",
    "addresses": [STRATEGY.lower(), OTHER],
    "protocols": ["Curve", "Convex"],
}


def test_fetch_indexes_by_every_address():
    store = MetasStore()
    session = SessionMock(ResponseMock([CURVE_META]))
    service = MetasService(store, base_url="https://meta.test/api", session=session)

    assert service.fetch(250)

    assert session.urls == ["https://meta.test/api/250/strategies/all"]
    meta = StrategyMeta.from_dict(CURVE_META)
    assert store.get(250, STRATEGY) == meta
    assert store.get(250, OTHER) == meta
    assert sorted(store.all(250).keys()) == sorted([STRATEGY, OTHER])
    assert store.all(1) == {}


def test_fetch_skips_bad_records_and_addresses():
    store = MetasStore()
    items = [
        {"name": "No addresses"},
        {"name": "Bad addresses", "addresses": "0x01"},
        "not a record",
        {"name": "Some bad", "addresses": ["0xnope", OTHER]},
    ]
    service = MetasService(store, session=SessionMock(ResponseMock(items)))

    assert service.fetch(1)

    assert list(store.all(1).keys()) == [OTHER]
    assert store.get(1, OTHER).name == "Some bad"
    assert store.get(1, OTHER).protocols == []


def test_fetch_merges_into_previous_records():
    store = MetasStore()
    session = SessionMock(
        ResponseMock([CURVE_META]),
        ResponseMock([{"name": "Other", "addresses": [OTHER]}]),
    )
    service = MetasService(store, session=session)
    assert service.fetch(1)
    assert service.fetch(1)
    assert store.get(1, STRATEGY) == StrategyMeta.from_dict(CURVE_META)
    assert store.get(1, OTHER).name == "Other"
    assert sorted(store.all(1).keys()) == sorted([STRATEGY, OTHER])


def test_merge_keeps_networks_apart():
    store = MetasStore()
    meta = StrategyMeta.from_dict(CURVE_META)
    store.merge(1, {STRATEGY: meta})
    store.merge(10, {OTHER: meta})
    assert store.all(1) == {STRATEGY: meta}
    assert store.all(10) == {OTHER: meta}


@pytest.mark.parametrize(
    "response",
    [
        requests.ConnectionError("offline"),
        requests.Timeout("slow"),
        ResponseMock([], status_code=502),
        ResponseMock(ValueError("not json")),
        ResponseMock({"error": "not a list"}),
    ],
)
def test_fetch_failure_keeps_previous_records(response):
    store = MetasStore()
    session = SessionMock(ResponseMock([CURVE_META]), response)
    service = MetasService(store, session=session)
    assert service.fetch(1)

    assert not service.fetch(1)
    assert store.get(1, STRATEGY) == StrategyMeta.from_dict(CURVE_META)


def test_base_url_from_env(monkeypatch):
    monkeypatch.setenv("VAULTCAT_META_BASE_URL", "http://localhost:8080/")
    service = MetasService(MetasStore(), session=SessionMock(ResponseMock([])))
    assert service.url(10) == "http://localhost:8080/10/strategies/all"


def test_default_base_url(monkeypatch):
    monkeypatch.delenv("VAULTCAT_META_BASE_URL", raising=False)
    service = MetasService(MetasStore(), session=SessionMock(ResponseMock([])))
    assert service.url(1) == "https://meta.yearn.network/api/1/strategies/all"


def test_strategy_meta_requires_addresses():
    with pytest.raises(KeyError):
        StrategyMeta.from_dict({"name": "x"})


def test_close_leaves_injected_session_open():
    session = SessionMock(ResponseMock([]))
    MetasService(MetasStore(), session=session).close()
    assert not session.closed


def test_close_owned_session(monkeypatch):
    session = SessionMock(ResponseMock([]))
    monkeypatch.setattr(requests, "Session", lambda: session)
    MetasService(MetasStore()).close()
    assert session.closed
