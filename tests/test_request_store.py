from datetime import timedelta

from portfolio.models import AccessRequest, APPROVED, PENDING

from .conftest import START


def make_request(request_id="r1", created_at=START):
    return AccessRequest(
        id=request_id,
        name="A",
        email="a@x.com",
        reason="eval",
        created_at=created_at,
        timestamp=created_at.isoformat(),
    )


def test_put_and_get(request_store):
    request_store.put(make_request())
    stored = request_store.get("r1")
    assert stored.status == PENDING
    assert "r1" in request_store
    assert len(request_store) == 1


def test_get_unknown_returns_none(request_store):
    assert request_store.get("missing") is None


def test_update_replaces_fields(request_store):
    request_store.put(make_request())
    updated = request_store.update("r1", status=APPROVED, approved_at=START)
    assert updated.status == APPROVED
    assert request_store.get("r1").approved_at == START


def test_update_unknown_is_noop(request_store):
    assert request_store.update("missing", status=APPROVED) is None
    assert len(request_store) == 0


def test_delete(request_store):
    request_store.put(make_request())
    assert request_store.delete("r1") is True
    assert request_store.delete("r1") is False
    assert request_store.get("r1") is None


def test_list_older_than_is_strict(request_store):
    request_store.put(make_request("old", START - timedelta(days=8)))
    request_store.put(make_request("edge", START - timedelta(days=7)))
    request_store.put(make_request("new", START))
    assert request_store.list_older_than(START - timedelta(days=7)) == ["old"]
