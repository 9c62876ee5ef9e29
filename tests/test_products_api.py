from app.core.config import settings
from app.core.db import get_db
from app.main import app
from tests.fakes import FakeDB, make_entry, make_group


def test_list_products_flattens_groups(client, fake_coll):
    fake_coll.docs = [
        make_group(products=[make_entry("p1", "Gold"), make_entry("p2", "Silver")]),
    ]

    resp = client.get("/api/v1/products")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data) == 2
    assert data[0] == {
        "id": "p1",
        "productName": "Gold",
        "productGroup": {"name": "Health Plus", "key": "HLT"},
        "productType": {"name": "Health", "key": "health"},
        "insurer": {"_id": "ins-1", "insurerCode": "AXA", "insurerName": "AXA Insurance"},
        "brokers": [{"key": "BRK1", "channelName": "Online"}],
        "status": "ACTIVE",
    }
    assert data[1]["productGroup"] == data[0]["productGroup"]
    assert data[1]["id"] == "p2"


def test_no_params_uses_defaults_and_empty_filter(client, fake_coll):
    client.get("/api/v1/products")

    call = fake_coll.calls[0]
    assert call["filter"] == {}
    assert call["skip"] == 0
    assert call["limit"] == 10
    assert call["max_time_ms"] == 10000


def test_invalid_page_and_limit_reset_to_defaults(client, fake_coll):
    for page, limit in [("0", "0"), ("-3", "-1"), ("abc", "xyz")]:
        resp = client.get("/api/v1/products", params={"page": page, "limit": limit})
        assert resp.status_code == 200

    for call in fake_coll.calls:
        assert call["skip"] == 0
        assert call["limit"] == 10


def test_out_of_range_page_and_limit_fall_back_to_defaults(client, fake_coll):
    cases = [
        ("99999999999999999999", "5"),
        ("2", "99999999999999999999"),
        ("1_0", " 3 "),
        ("\u0665", "\u0665"),
        (str(2**62), "4"),
    ]
    for page, limit in cases:
        resp = client.get("/api/v1/products", params={"page": page, "limit": limit})
        assert resp.status_code == 200

    assert [(c["skip"], c["limit"]) for c in fake_coll.calls] == [
        (0, 5),
        (10, 10),
        (0, 10),
        (0, 10),
        (0, 4),
    ]


def test_search_pagination_is_applied_to_groups(client, fake_coll):
    fake_coll.docs = [
        make_group(key=f"G{i}", products=[make_entry(f"{i}a"), make_entry(f"{i}b")])
        for i in range(8)
    ]

    resp = client.get("/api/v1/products", params={"param": "Health", "page": "2", "limit": "5"})

    call = fake_coll.calls[0]
    assert call["skip"] == 5
    assert call["limit"] == 5
    assert "$or" in call["filter"]
    data = resp.json()["data"]
    # three groups left on page two, two products each
    assert [p["id"] for p in data] == ["5a", "5b", "6a", "6b", "7a", "7b"]


def test_status_filter_is_uppercased(client, fake_coll):
    client.get("/api/v1/products", params={"status": "active"})

    assert fake_coll.calls[0]["filter"] == {
        "productList.productStatus": {"$regex": "ACTIVE", "$options": "i"}
    }


def test_malformed_nested_records_do_not_fail_request(client, fake_coll):
    broken = make_group(key="X")
    del broken["productList"]
    fake_coll.docs = [
        broken,
        make_group(
            key="Y",
            products=[
                make_entry(
                    "y1",
                    brokers=[{"key": "B1", "channelName": "Web"}, None, {"key": "B2", "channelName": "Agent"}],
                )
            ],
        ),
    ]

    resp = client.get("/api/v1/products")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data) == 1
    assert [b["key"] for b in data[0]["brokers"]] == ["B1", "B2"]


def test_no_matches_returns_empty_data(client):
    resp = client.get("/api/v1/products", params={"param": "nothing"})
    assert resp.status_code == 200
    assert resp.json() == {"data": []}


def test_query_error_returns_raw_text(client, fake_coll):
    fake_coll.error = RuntimeError("server selection timeout")

    resp = client.get("/api/v1/products")

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "server selection timeout"


def test_query_timeout_returns_500(client, fake_coll, monkeypatch):
    monkeypatch.setattr(settings, "query_timeout_seconds", 0.05)
    fake_coll.delay = 1
    fake_coll.docs = [make_group(products=[make_entry()])]

    resp = client.get("/api/v1/products")

    assert resp.status_code == 500
    assert "deadline" in resp.text
    assert fake_coll.cursors[0].closed


def test_health_ok(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_health_unavailable(client):
    app.dependency_overrides[get_db] = lambda: FakeDB(ok=False)

    resp = client.get("/api/v1/health")

    assert resp.status_code == 503
    assert resp.json() == {"status": "unavailable"}
