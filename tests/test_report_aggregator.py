from datetime import date, datetime, timezone

from app.core.report_aggregator import (
    build_staff_report,
    build_student_report,
    build_transport_report,
    in_date_range,
    maintenance_rollup,
    sort_buses,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_date_range_ignores_time_of_day() -> None:
    assert in_date_range("2024-03-15T00:00:00Z", "2024-03-01", "2024-03-31")
    assert in_date_range("2024-03-31T23:59:59+05:30", "2024-03-01", "2024-03-31")
    assert not in_date_range("2024-04-01T00:00:00Z", "2024-03-01", "2024-03-31")
    assert not in_date_range(None, "2024-03-01", None)
    assert in_date_range(None, None, None)


def test_student_report_filters_and_groups() -> None:
    students = [
        {"name": "A", "class": "10th", "section": "A", "status": "Active", "admission_date": "2024-03-15T00:00:00Z"},
        {"name": "B", "class": "10", "section": "B", "status": "Inactive", "admission_date": date(2024, 3, 20)},
        {"name": "C", "class": "9", "section": "A", "status": "Active", "admission_date": "2024-03-02"},
        {"name": "D", "class": "10", "section": "A", "status": "Graduated", "admission_date": "2024-05-01"},
    ]
    report = build_student_report(
        students, {"class": "10", "from_date": "2024-03-01", "to_date": "2024-03-31"}, now=NOW
    )

    assert report["type"] == "student"
    assert [s["name"] for s in report["data"]] == ["A", "B"]
    stats = report["statistics"]
    assert (stats["total"], stats["active"], stats["inactive"], stats["graduated"]) == (2, 1, 1, 0)
    assert set(stats["byClass"]) == {"10th", "10"}
    assert set(stats["bySection"]) == {"10th-A", "10-B"}
    assert report["filters"] == {"class": "10", "from_date": "2024-03-01", "to_date": "2024-03-31"}


def test_student_without_class_is_grouped_as_not_specified() -> None:
    report = build_student_report([{"name": "X", "status": "Active"}], {}, now=NOW)
    assert list(report["statistics"]["byClass"]) == ["Not Specified"]


def test_staff_report_average_experience() -> None:
    staff = [
        {"name": "A", "designation": "Teacher", "status": "Active", "experience": 3, "class": "5"},
        {"name": "B", "designation": None, "status": "Retired", "experience": 4.5, "class": None},
        {"name": "C", "designation": "Teacher", "status": "Inactive", "experience": None, "class": "5"},
    ]
    report = build_staff_report(staff, {}, now=NOW)
    stats = report["statistics"]
    assert stats["averageExperience"] == 3.75
    assert (stats["active"], stats["inactive"], stats["retired"]) == (1, 1, 1)
    assert set(stats["byDesignation"]) == {"Teacher", "Not Specified"}
    assert list(stats["byClass"]) == ["5"]


def test_staff_report_without_experience_averages_zero() -> None:
    assert build_staff_report([], {}, now=NOW)["statistics"]["averageExperience"] == 0


def test_bus_numbers_sort_numerically() -> None:
    buses = [{"bus_number": "Bus-10"}, {"bus_number": "Bus-2"}, {"bus_number": "Bus-1"}]
    assert [b["bus_number"] for b in sort_buses(buses)] == ["Bus-1", "Bus-2", "Bus-10"]


def test_bus_numbers_without_numerals_fall_back_to_natural_order() -> None:
    buses = [{"bus_number": "beta"}, {"bus_number": "Alpha"}]
    assert [b["bus_number"] for b in sort_buses(buses)] == ["Alpha", "beta"]


def test_maintenance_rollup() -> None:
    records = [
        {"maintenance_date": date(2024, 5, 1), "cost": "1500.50", "next_maintenance_date": None},
        {"maintenance_date": date(2024, 3, 1), "cost": None, "next_maintenance_date": date(2024, 9, 1)},
        {"maintenance_date": date(2024, 1, 1), "cost": "n/a", "next_maintenance_date": date(2024, 4, 1)},
    ]
    rollup = maintenance_rollup(records)
    assert rollup["maintenance_count"] == 3
    assert rollup["total_maintenance_cost"] == 1500.5
    assert rollup["last_maintenance_date"] == date(2024, 5, 1)
    assert rollup["next_maintenance_date"] == date(2024, 9, 1)


def test_transport_report() -> None:
    buses = [
        {"id": 1, "bus_number": "Bus-10", "status": "Active", "capacity": 40, "route_name": "North",
         "insurance_expiry": date(2024, 1, 20)},
        {"id": 2, "bus_number": "Bus-2", "status": "Under Maintenance", "capacity": 30, "route_name": "South",
         "fc_expiry": date(2023, 12, 1)},
        {"id": 3, "bus_number": "Bus-1", "status": "Active", "capacity": None, "route_name": "North"},
    ]
    rollups = {1: maintenance_rollup([{"maintenance_date": date(2023, 11, 1), "cost": 200}])}
    report = build_transport_report(buses, {}, rollups=rollups, now=NOW)

    assert [b["bus_number"] for b in report["data"]] == ["Bus-1", "Bus-2", "Bus-10"]
    stats = report["statistics"]
    assert stats["total"] == 3
    assert stats["underMaintenance"] == 1
    assert stats["totalCapacity"] == 70
    assert stats["expiringDocuments"] == {"insurance": 1, "fc": 0, "permit": 0}
    assert stats["expiredDocuments"] == {"insurance": 0, "fc": 1, "permit": 0}
    assert stats["totalMaintenanceCost"] == 200
    assert set(stats["byRoute"]) == {"North", "South"}

    bus_10 = report["data"][2]
    assert bus_10["maintenance_count"] == 1
    # Buses without a rollup get zeroed maintenance fields
    assert report["data"][0]["maintenance_count"] == 0
    assert [b["id"] for b in report["maintenanceAlerts"]] == [1]


def test_transport_report_filters_by_status_and_route() -> None:
    buses = [
        {"id": 1, "bus_number": "Bus-1", "status": "Active", "route_name": "North"},
        {"id": 2, "bus_number": "Bus-2", "status": "Active", "route_name": "South"},
        {"id": 3, "bus_number": "Bus-3", "status": "Inactive", "route_name": "North"},
    ]
    report = build_transport_report(buses, {"status": "Active", "route": "North"}, now=NOW)
    assert [b["id"] for b in report["data"]] == [1]
    assert report["filters"] == {"status": "Active", "route": "North"}
