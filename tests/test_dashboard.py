import asyncio

from abhaya.services.dashboard_service import build_dashboard, build_risk_zones
from conftest import AUTHORITY, CITIZEN

CHARMINAR = (17.3616, 78.4746)
HITECH_CITY = (17.4435, 78.3772)


def seed_incident(db, doc_id, lat, lng, resolved=False, **extra):
    db.collection("incidents").document(doc_id).set({
        "incidentType": "Harassment",
        "incidentTime": "2025-03-01T21:15",
        "incidentPlace": "somewhere",
        "latitude": lat,
        "longitude": lng,
        "resolved": resolved,
        **extra,
    })


def test_build_risk_zones_decorates_clusters():
    reports = [{"latitude": CHARMINAR[0], "longitude": CHARMINAR[1]}] * 5
    reports += [{"latitude": HITECH_CITY[0], "longitude": HITECH_CITY[1]}] * 3
    reports += [{"latitude": 17.9, "longitude": 79.0}]

    zones = build_risk_zones(reports)

    assert [(z["count"], z["severity"], z["color"]) for z in zones] == [
        (5, "high", "red"),
        (3, "medium", "orange"),
        (1, "low", "yellow"),
    ]
    assert all(z["radius_meters"] == 500 for z in zones)
    assert all(z["fill_opacity"] == 0.4 for z in zones)
    assert (zones[0]["lat"], zones[0]["lng"]) == CHARMINAR


def test_build_risk_zones_with_custom_radius():
    reports = [{"latitude": 0.0, "longitude": 0.0}, {"latitude": 0.007, "longitude": 0.0}]  # ~778 m
    assert len(build_risk_zones(reports)) == 2
    zones = build_risk_zones(reports, radius_meters=1000)
    assert len(zones) == 1
    assert zones[0]["radius_meters"] == 1000


def test_build_dashboard_skips_resolved_records(db):
    seed_incident(db, "a", *CHARMINAR)
    seed_incident(db, "b", *CHARMINAR)
    seed_incident(db, "c", *CHARMINAR, resolved=True)
    seed_incident(db, "d", None, None)
    db.collection("emergency_alerts").document("x").set({"userId": "u", "latitude": 1.0, "longitude": 2.0, "resolved": False})
    db.collection("emergency_alerts").document("y").set({"userId": "u", "latitude": 1.0, "longitude": 2.0, "resolved": True})

    payload = asyncio.run(build_dashboard())

    assert {i["id"] for i in payload["incidents"]} == {"a", "b", "d"}
    assert [(z["count"], z["severity"]) for z in payload["risk_zones"]] == [(2, "low")]
    assert [a["id"] for a in payload["emergency_alerts"]] == ["x"]
    assert payload["map"] == {"center": (17.3616, 78.4746), "zoom": 12}


def test_dashboard_endpoint(client, login, db):
    for n in range(5):
        seed_incident(db, f"near-{n}", *CHARMINAR)
    seed_incident(db, "far", *HITECH_CITY, timestamp={"seconds": 1700000000})
    seed_incident(db, "closed", *HITECH_CITY, resolved=True)

    login(AUTHORITY)
    r = client.get("/dashboard")
    assert r.status_code == 200

    body = r.json()
    assert body["map"]["center"] == [17.3616, 78.4746]
    assert len(body["incidents"]) == 6
    assert [(z["count"], z["color"]) for z in body["risk_zones"]] == [(5, "red"), (1, "yellow")]
    assert body["emergency_alerts"] == []


def test_risk_zones_endpoint(client, login, db):
    seed_incident(db, "one", *CHARMINAR)
    seed_incident(db, "two", 17.3620, 78.4735)
    seed_incident(db, "three", 17.3630, 78.4750)

    login(AUTHORITY)
    zones = client.get("/dashboard/risk-zones").json()
    assert len(zones) == 1
    assert zones[0]["count"] == 3
    assert zones[0]["severity"] == "medium"


def test_dashboard_requires_authority(client, login):
    assert client.get("/dashboard").status_code == 401
    login(CITIZEN)
    assert client.get("/dashboard").status_code == 403
    assert client.get("/dashboard/risk-zones").status_code == 403
