from __future__ import annotations

import pytest
import requests

from src.staffing_hours.staffing_hours.core.exceptions import StoreError
from src.staffing_hours.staffing_hours.store.lark_gateway import LarkConfig, LarkRecordStore, build_filter_formula


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls: list[dict] = []

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "headers": headers})
        resp = self._responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def token(value="t-1"):
    return FakeResponse(200, {"code": 0, "tenant_access_token": value, "expire": 7200})


def page(ids, *, has_more=False, page_token=None):
    items = [{"record_id": rid, "fields": {"Mã nhân viên": rid.upper()}} for rid in ids]
    return FakeResponse(200, {"code": 0, "data": {"items": items, "has_more": has_more, "page_token": page_token}})


def make_store(responses):
    session = FakeSession(responses)
    config = LarkConfig(
        app_id="cli_app",
        app_secret="secret",
        base_id="base1",
        tables={"attendance": "tblA"},
        page_size=2,
        max_pages=3,
    )
    return LarkRecordStore(config, session=session, clock=lambda: 1000.0), session


def _token_calls(session):
    return [c for c in session.calls if c["url"].endswith("/auth/v3/tenant_access_token/internal")]


def test_list_all_follows_pagination_and_reuses_token():
    store, session = make_store([token(), page(["rec1", "rec2"], has_more=True, page_token="p2"), page(["rec3"])])

    records = store.list_all("attendance")

    assert [r.record_id for r in records] == ["rec1", "rec2", "rec3"]
    assert records[0].fields == {"Mã nhân viên": "REC1"}
    assert len(_token_calls(session)) == 1
    assert session.calls[1]["headers"]["Authorization"] == "Bearer t-1"
    assert session.calls[1]["url"].endswith("/bitable/v1/apps/base1/tables/tblA/records")
    assert session.calls[2]["params"]["page_token"] == "p2"


def test_list_all_stops_at_max_pages(caplog):
    store, session = make_store(
        [
            token(),
            page(["r1"], has_more=True, page_token="a"),
            page(["r2"], has_more=True, page_token="b"),
            page(["r3"], has_more=True, page_token="c"),
        ]
    )

    records = store.list_all("attendance")

    assert len(records) == 3
    assert len(session.calls) == 4
    assert "maximum page limit" in caplog.text


def test_filters_become_a_formula():
    assert build_filter_formula({"Mã nhân viên": "NV01", "Vị trí": None}) == 'AND(CurrentValue.[Mã nhân viên]="NV01")'
    assert build_filter_formula({"Ghi chú": 'say "hi"'}) == 'AND(CurrentValue.[Ghi chú]="say \\"hi\\"")'
    assert build_filter_formula(None) == ""

    store, session = make_store([token(), page([])])
    store.list_all("attendance", {"Mã nhân viên": "NV01"})
    assert session.calls[1]["params"]["filter"] == 'AND(CurrentValue.[Mã nhân viên]="NV01")'


def test_known_lark_code_maps_to_store_error():
    store, _ = make_store([token(), FakeResponse(200, {"code": 1254006, "msg": "too many requests"})])

    with pytest.raises(StoreError) as exc:
        store.list_all("attendance")

    assert exc.value.code == "LARK_RATE_LIMIT"
    assert exc.value.operation == "list_all:attendance"


def test_auth_error_drops_cached_token():
    store, session = make_store(
        [
            token("t-1"),
            FakeResponse(200, {"code": 99991663, "msg": "invalid token"}),
            token("t-2"),
            page(["rec1"]),
        ]
    )

    with pytest.raises(StoreError) as exc:
        store.list_all("attendance")
    assert exc.value.code == "LARK_AUTH_ERROR"

    assert [r.record_id for r in store.list_all("attendance")] == ["rec1"]
    assert len(_token_calls(session)) == 2
    assert session.calls[-1]["headers"]["Authorization"] == "Bearer t-2"


def test_get_by_id_returns_none_for_missing_record():
    store, _ = make_store([token(), FakeResponse(200, {"code": 230004, "msg": "record not found"})])

    assert store.get_by_id("attendance", "recX") is None


def test_network_and_http_errors():
    store, _ = make_store([token(), requests.ConnectionError("boom")])
    with pytest.raises(StoreError) as exc:
        store.list_all("attendance")
    assert exc.value.code == "NETWORK_ERROR"

    store, _ = make_store([token(), FakeResponse(500, None)])
    with pytest.raises(StoreError) as exc:
        store.list_all("attendance")
    assert exc.value.code == "LARK_API_ERROR"


def test_unconfigured_table_fails_before_any_request():
    store, session = make_store([])

    with pytest.raises(StoreError) as exc:
        store.list_all("employees")

    assert exc.value.code == "LARK_TABLE_NOT_FOUND"
    assert session.calls == []


def test_insert_update_delete_send_fields():
    store, session = make_store(
        [
            token(),
            FakeResponse(200, {"code": 0, "data": {"record": {"record_id": "recNew", "fields": {"a": 1}}}}),
            FakeResponse(200, {"code": 0, "data": {"record": {"record_id": "recNew", "fields": {"a": 2}}}}),
            FakeResponse(200, {"code": 0, "data": {"deleted": True}}),
        ]
    )

    created = store.insert("attendance", {"a": 1})
    updated = store.update_by_id("attendance", "recNew", {"a": 2})
    store.delete_by_id("attendance", "recNew")

    assert created.record_id == "recNew"
    assert updated.fields == {"a": 2}
    assert [c["method"] for c in session.calls[1:]] == ["POST", "PUT", "DELETE"]
    assert session.calls[1]["json"] == {"fields": {"a": 1}}
    assert session.calls[3]["url"].endswith("/records/recNew")
