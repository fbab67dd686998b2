import httpx

from app.core.errors import ErrorKind
from app.services.catalog_service import PLACEHOLDER_SERVICES

from tests.fakes import add_service


def test_placeholder_catalog_without_backend(catalog_service):
    res = catalog_service.get_all_services(None)

    assert res.ok
    assert res.degraded_by == ErrorKind.BACKEND_UNAVAILABLE
    assert [s.name for s in res.data] == ["Two Days Pilot", "Flight Simulator", "Skydive Malaysia"]
    assert [s.price for s in res.data] == [500, 300, 800]
    assert all(s.active for s in res.data)
    assert len(PLACEHOLDER_SERVICES) == 3


def test_lists_only_active_newest_first(catalog_service, client):
    old = add_service(client, "a", name="Old")
    add_service(client, "b", name="Hidden", active=False)
    new = add_service(client, "c", name="New")

    res = catalog_service.get_all_services(client)

    assert [s.id for s in res.data] == [new["id"], old["id"]]
    assert res.degraded_by is None


def test_listing_error_is_reported(catalog_service, client):
    client.failures[("services", "select")] = httpx.ConnectError("offline")

    res = catalog_service.get_all_services(client)

    assert res.error.kind == ErrorKind.BACKEND_UNAVAILABLE


def test_featured_is_a_prefix_of_listing(catalog_service, client):
    for i in range(5):
        add_service(client, f"svc-{i}", name=f"Service {i}")

    listing = catalog_service.get_all_services(client).data
    featured = catalog_service.get_featured_services(client)

    assert [s.id for s in featured.data] == [s.id for s in listing[:3]]
    assert len(client.calls_to("services")) == 2


def test_featured_swallows_errors(catalog_service, client):
    client.failures[("services", "select")] = httpx.ConnectError("offline")

    res = catalog_service.get_featured_services(client)

    assert res.ok
    assert res.data == []


def test_featured_without_backend_uses_placeholders(catalog_service):
    res = catalog_service.get_featured_services(None, limit=2)
    assert [s.id for s in res.data] == ["1", "2"]


def test_get_service_by_id(catalog_service, client):
    add_service(client, "svc-9", name="Night Flight")

    assert catalog_service.get_service_by_id(client, "svc-9").data.name == "Night Flight"
    assert catalog_service.get_service_by_id(client, "missing").error.kind == ErrorKind.NOT_FOUND


def test_malformed_service_row_is_unknown(catalog_service, client):
    add_service(client, "svc-bad", name=None, price="call us")

    single = catalog_service.get_service_by_id(client, "svc-bad")
    listing = catalog_service.get_all_services(client)

    assert single.error.kind == ErrorKind.UNKNOWN
    assert listing.error.kind == ErrorKind.UNKNOWN
    assert catalog_service.get_featured_services(client).data == []


def test_create_service_coerces_price(catalog_service, client):
    res = catalog_service.create_service(client, {"name": " Sunset Flight ", "price": "499.90", "duration": "1 hour"})

    assert res.ok
    assert res.data.name == "Sunset Flight"
    assert res.data.price == 499.9
    assert res.data.active is True


def test_create_service_rejects_negative_price(catalog_service, client):
    res = catalog_service.create_service(client, {"name": "Cheap", "price": -5})

    assert res.error.kind == ErrorKind.VALIDATION_FAILED
    assert client.calls == []


def test_update_service_sends_only_set_fields(catalog_service, client):
    add_service(client, "svc-1", description="Keep me")

    res = catalog_service.update_service(client, "svc-1", {"price": 650})

    assert res.data.price == 650
    assert res.data.description == "Keep me"
    assert client.tables["services"][0]["updated_at"]


def test_toggle_and_delete(catalog_service, client):
    add_service(client, "svc-1")

    assert catalog_service.toggle_service_status(client, "svc-1", False).data.active is False
    assert catalog_service.get_all_services(client).data == []

    assert catalog_service.delete_service(client, "svc-1").data is True
    assert client.tables["services"] == []


def test_admin_writes_need_backend(catalog_service):
    assert catalog_service.create_service(None, {"name": "x", "price": 1}).error.kind == ErrorKind.BACKEND_UNAVAILABLE
    assert catalog_service.delete_service(None, "svc-1").error.kind == ErrorKind.BACKEND_UNAVAILABLE
