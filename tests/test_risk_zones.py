import math
import random
from types import MappingProxyType, SimpleNamespace

from abhaya.config.mock_firestore import MockFirestore
from abhaya.services.risk_zones import (
    EARTH_RADIUS_METERS,
    cluster_reports,
    haversine_meters,
    severity_tier,
)


def north_of_equator(meters):
    """Latitude (degrees) that lies `meters` north of (0, 0) along the prime meridian."""
    return math.degrees(meters / EARTH_RADIUS_METERS)


def report(lat, lng, **extra):
    return {"latitude": lat, "longitude": lng, **extra}


def test_haversine_zero_distance():
    assert haversine_meters(17.3616, 78.4746, 17.3616, 78.4746) == 0.0


def test_haversine_along_meridian_matches_arc_length():
    lat = north_of_equator(1234.5)
    assert math.isclose(haversine_meters(0.0, 0.0, lat, 0.0), 1234.5, rel_tol=1e-6)


def test_haversine_one_degree_of_longitude_at_equator():
    expected = EARTH_RADIUS_METERS * math.pi / 180
    assert math.isclose(haversine_meters(0.0, 0.0, 0.0, 1.0), expected, rel_tol=1e-6)


def test_haversine_is_symmetric():
    d1 = haversine_meters(17.3616, 78.4746, 17.9, 79.0)
    d2 = haversine_meters(17.9, 79.0, 17.3616, 78.4746)
    assert math.isclose(d1, d2, rel_tol=1e-12)


def test_empty_input_gives_no_clusters():
    assert cluster_reports([]) == []


def test_documented_example():
    reports = [
        report(17.3616, 78.4746, id="a"),
        report(17.3616, 78.4746, id="b"),
        report(17.9, 79.0, id="c"),
    ]
    assert cluster_reports(reports) == [
        {"lat": 17.3616, "lng": 78.4746, "count": 2},
        {"lat": 17.9, "lng": 79.0, "count": 1},
    ]


def test_identical_points_form_single_cluster():
    reports = [report(17.4, 78.5) for _ in range(7)]
    assert cluster_reports(reports) == [{"lat": 17.4, "lng": 78.5, "count": 7}]


def test_reports_missing_a_coordinate_are_ignored():
    reports = [
        report(17.3616, 78.4746),
        report(17.3616, None),
        report(None, 78.4746),
        {"id": "no-coordinates"},
        report(17.3616, 78.4746),
    ]
    assert cluster_reports(reports) == [{"lat": 17.3616, "lng": 78.4746, "count": 2}]


def test_zero_is_a_real_coordinate():
    assert cluster_reports([report(0.0, 0.0)]) == [{"lat": 0.0, "lng": 0.0, "count": 1}]


def test_out_of_range_coordinates_are_processed():
    clusters = cluster_reports([report(123.0, 500.0), report(123.0, 500.0)])
    assert clusters == [{"lat": 123.0, "lng": 500.0, "count": 2}]


def test_objects_with_attributes_are_accepted():
    reports = [SimpleNamespace(latitude=1.0, longitude=2.0), SimpleNamespace(latitude=1.0, longitude=None)]
    assert cluster_reports(reports) == [{"lat": 1.0, "lng": 2.0, "count": 1}]


def test_other_fields_and_resolved_flag_are_not_used():
    reports = [report(1.0, 1.0, resolved=True, incidentType="x"), report(1.0, 1.0, resolved=False)]
    assert cluster_reports(reports)[0]["count"] == 2


def test_just_inside_radius_joins_cluster():
    reports = [report(0.0, 0.0), report(north_of_equator(499.999), 0.0)]
    assert cluster_reports(reports) == [{"lat": 0.0, "lng": 0.0, "count": 2}]


def test_just_outside_radius_starts_new_cluster():
    far = north_of_equator(500.001)
    clusters = cluster_reports([report(0.0, 0.0), report(far, 0.0)])
    assert [c["count"] for c in clusters] == [1, 1]
    assert clusters[1]["lat"] == far


def test_exactly_radius_apart_is_not_a_match():
    exactly_500 = lambda *_: 500.0
    clusters = cluster_reports([report(0.0, 0.0), report(1.0, 1.0)], distance=exactly_500)
    assert len(clusters) == 2


def test_below_radius_with_injected_distance_is_a_match():
    just_below = lambda *_: 499.999
    clusters = cluster_reports([report(0.0, 0.0), report(1.0, 1.0)], distance=just_below)
    assert clusters == [{"lat": 0.0, "lng": 0.0, "count": 2}]


def test_custom_radius():
    reports = [report(0.0, 0.0), report(north_of_equator(800), 0.0)]
    assert len(cluster_reports(reports)) == 2
    assert len(cluster_reports(reports, radius_meters=1000)) == 1


def test_anchor_stays_at_first_report():
    reports = [report(0.0, 0.0), report(north_of_equator(450), 0.0), report(north_of_equator(900), 0.0)]
    clusters = cluster_reports(reports)
    # third report is 450 m from the second but 900 m from the anchor
    assert clusters == [
        {"lat": 0.0, "lng": 0.0, "count": 2},
        {"lat": north_of_equator(900), "lng": 0.0, "count": 1},
    ]


def test_first_match_wins_over_nearest_match():
    p = report(0.0, 0.0)
    q = report(north_of_equator(600), 0.0)
    r = report(north_of_equator(450), 0.0)  # 450 m from p, 150 m from q
    clusters = cluster_reports([p, q, r])
    assert [c["count"] for c in clusters] == [2, 1]


def test_order_changes_clusters():
    a = report(0.0, 0.0)
    b = report(north_of_equator(400), 0.0)
    c = report(north_of_equator(800), 0.0)

    forward = cluster_reports([a, b, c])
    reordered = cluster_reports([b, a, c])

    assert [z["count"] for z in forward] == [2, 1]
    assert reordered == [{"lat": b["latitude"], "lng": 0.0, "count": 3}]
    assert forward != reordered


def test_same_order_is_deterministic():
    rng = random.Random(7)
    reports = [report(17.36 + rng.uniform(0, 0.02), 78.47 + rng.uniform(0, 0.02)) for _ in range(60)]
    assert cluster_reports(reports) == cluster_reports(list(reports))


def test_counts_sum_to_reports_with_coordinates():
    rng = random.Random(42)
    reports = []
    for _ in range(200):
        lat = 17.36 + rng.uniform(0, 0.05)
        lng = 78.47 + rng.uniform(0, 0.05)
        if rng.random() < 0.1:
            lng = None
        reports.append(report(lat, lng))

    clusters = cluster_reports(reports)
    with_coordinates = [r for r in reports if r["latitude"] is not None and r["longitude"] is not None]

    assert sum(c["count"] for c in clusters) == len(with_coordinates)


def test_every_report_is_within_radius_of_some_earlier_anchor():
    rng = random.Random(3)
    reports = [report(17.36 + rng.uniform(0, 0.03), 78.47 + rng.uniform(0, 0.03)) for _ in range(100)]
    clusters = cluster_reports(reports)
    anchors = [(c["lat"], c["lng"]) for c in clusters]
    for r in reports:
        point = (r["latitude"], r["longitude"])
        assert point in anchors or any(haversine_meters(*a, *point) < 500 for a in anchors)


def test_input_is_not_mutated():
    reports = [report(1.0, 1.0), report(1.0, 1.0)]
    cluster_reports(reports)
    assert reports == [report(1.0, 1.0), report(1.0, 1.0)]


def test_severity_tiers():
    assert severity_tier(0) == "low"
    assert severity_tier(1) == "low"
    assert severity_tier(2) == "low"
    assert severity_tier(3) == "medium"
    assert severity_tier(4) == "medium"
    assert severity_tier(5) == "high"
    assert severity_tier(10) == "high"


def test_blank_coordinates_are_ignored():
    reports = [report("", 78.5), report(17.36, ""), report(17.36, 78.5), report(17.36, 78.5)]
    assert cluster_reports(reports) == [{"lat": 17.36, "lng": 78.5, "count": 2}]


def test_read_only_mappings_are_accepted():
    reports = [MappingProxyType(report(1.0, 2.0)), MappingProxyType(report(1.0, 2.0))]
    assert cluster_reports(reports) == [{"lat": 1.0, "lng": 2.0, "count": 2}]


def test_document_snapshots_are_accepted():
    db = MockFirestore()
    db.collection("incidents").document("a").set(report(17.3616, 78.4746))
    db.collection("incidents").document("b").set(report(17.3616, 78.4746))
    db.collection("incidents").document("c").set(report(None, 78.4746))

    clusters = cluster_reports(db.collection("incidents").stream())
    assert clusters == [{"lat": 17.3616, "lng": 78.4746, "count": 2}]
