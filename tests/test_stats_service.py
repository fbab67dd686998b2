import uuid

import httpx

from app.core.errors import ErrorKind

from tests.fakes import add_booking


def test_dashboard_counts_and_revenue(stats_service, client):
    user = uuid.uuid4()
    add_booking(client, user, status="pending", total_price=100)
    add_booking(client, user, status="approved", total_price=500)
    add_booking(client, user, status="approved", total_price="249.50")
    add_booking(client, user, status="approved", total_price=None)
    add_booking(client, user, status="rejected", total_price=900)

    res = stats_service.get_dashboard_stats(client)

    assert res.ok
    assert res.data.total_bookings == 5
    assert res.data.pending_bookings == 1
    assert res.data.approved_bookings == 3
    assert res.data.total_revenue == 749.5
    assert res.data.total_revenue_display == "RM 749.50"


def test_dashboard_counts_use_head_requests(stats_service, client):
    stats_service.get_dashboard_stats(client)

    calls = client.calls_to("bookings")
    assert len(calls) == 4
    assert [c.filters for c in calls[:3]] == [[], [("eq", "status", "pending")], [("eq", "status", "approved")]]


def test_dashboard_without_backend_is_zero(stats_service):
    res = stats_service.get_dashboard_stats(None)

    assert res.ok
    assert res.degraded_by == ErrorKind.BACKEND_UNAVAILABLE
    assert res.data.model_dump() == {
        "total_bookings": 0,
        "pending_bookings": 0,
        "approved_bookings": 0,
        "total_revenue": 0,
        "total_revenue_display": "RM 0",
    }


def test_dashboard_never_fails(stats_service, client):
    add_booking(client, uuid.uuid4(), status="approved")
    client.failures[("bookings", "select")] = httpx.ConnectError("offline")

    res = stats_service.get_dashboard_stats(client)

    assert res.ok
    assert res.data.total_bookings == 0
    assert res.data.total_revenue == 0
    assert res.degraded_by == ErrorKind.BACKEND_UNAVAILABLE


def test_dashboard_non_numeric_price_is_zero(stats_service, client):
    add_booking(client, uuid.uuid4(), status="approved", total_price="abc")

    res = stats_service.get_dashboard_stats(client)

    assert res.ok
    assert res.data.total_bookings == 0
    assert res.data.total_revenue_display == "RM 0"
    assert res.degraded_by == ErrorKind.UNKNOWN


def test_recent_bookings_delegates(stats_service, client):
    for _ in range(3):
        add_booking(client, uuid.uuid4())

    res = stats_service.get_recent_bookings(client, limit=2)

    assert len(res.data) == 2
