import pytest
import requests

from tdaoptions.exchanges import tdameritrade
from tdaoptions.exchanges.tdameritrade import (
    OrderSubmitError,
    TDAClient,
    TDACreds,
    place_order,
)
from tdaoptions.models.order import TradeRequest
from tdaoptions.strategies.options import build_order


class FakeResponse:
    def __init__(self, status_code: int, text: str = ""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """미리 정한 응답/예외를 순서대로 돌려주는 requests.Session 대역"""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.closed = False

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        out = self.outcomes.pop(0)
        if isinstance(out, Exception):
            raise out
        return out

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr(tdameritrade.time, "sleep", lambda s: sleeps.append(s))
    return sleeps


def _body():
    return build_order(TradeRequest.call("AAPL", 4.5, 1))


def test_posts_json_to_account_orders_url():
    s = FakeSession([FakeResponse(201)])
    headers = TDACreds("tok").auth_headers()
    ok = TDAClient(session=s).place_order("12345", _body(), headers)

    assert ok is True
    assert len(s.calls) == 1
    call = s.calls[0]
    assert call["url"] == "https://api.tdameritrade.com/v1/accounts/12345/orders"
    assert call["json"] == _body().to_dict()
    assert call["headers"] == {"Authorization": "Bearer tok"}
    assert call["timeout"] == 10


def test_retries_transient_status_then_succeeds(no_sleep):
    s = FakeSession([FakeResponse(503), FakeResponse(429), FakeResponse(201)])
    assert TDAClient(session=s).place_order("1", _body(), {}) is True
    assert len(s.calls) == 3
    assert no_sleep == [0.5, 1.0]


def test_gives_up_after_three_attempts_and_still_reports_success():
    s = FakeSession([FakeResponse(500)] * 5)
    assert TDAClient(session=s).place_order("1", _body(), {}) is True
    assert len(s.calls) == 3


def test_broker_rejection_is_not_surfaced(caplog):
    s = FakeSession([FakeResponse(400, '{"error":"bad symbol"}')])
    caplog.set_level("WARNING")
    assert TDAClient(session=s).place_order("1", _body(), {}) is True
    assert len(s.calls) == 1
    assert any("status=400" in r.message for r in caplog.records)


def test_transport_errors_propagate_after_retries():
    s = FakeSession([requests.ConnectionError("boom")] * 3)
    with pytest.raises(OrderSubmitError) as ei:
        TDAClient(session=s).place_order("1", _body(), {})
    assert len(s.calls) == 3
    assert isinstance(ei.value.__cause__, requests.ConnectionError)


def test_timeout_then_success():
    s = FakeSession([requests.Timeout("slow"), FakeResponse(200)])
    assert TDAClient(session=s).place_order("1", {"raw": True}, {}) is True
    assert s.calls[1]["json"] == {"raw": True}


def test_module_place_order_keeps_caller_session_open():
    s = FakeSession([FakeResponse(201)])
    assert place_order(_body(), "999", {"X": "1"}, session=s, base_url="http://localhost/v1/")
    assert s.calls[0]["url"] == "http://localhost/v1/accounts/999/orders"
    assert not s.closed


def test_module_place_order_closes_session_it_created(monkeypatch):
    created = []

    def new_session():
        sess = FakeSession([FakeResponse(201)])
        created.append(sess)
        return sess

    monkeypatch.setattr(tdameritrade.requests, "Session", new_session)
    assert place_order(_body(), "1", {})
    assert place_order(_body(), "1", {})
    # 호출마다 새 세션, 사용 후 닫힘
    assert len(created) == 2
    assert all(sess.closed for sess in created)


def test_non_transient_request_errors_are_wrapped():
    s = FakeSession([requests.exceptions.ChunkedEncodingError("cut off")])
    with pytest.raises(OrderSubmitError) as ei:
        TDAClient(session=s).place_order("1", _body(), {})
    assert len(s.calls) == 1
    assert isinstance(ei.value.__cause__, requests.exceptions.ChunkedEncodingError)
