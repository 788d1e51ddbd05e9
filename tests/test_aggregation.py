from datetime import datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from sentinel.core.aggregation import (
    chronic_absenteeism,
    collect_unregistered,
    count_event_types,
    count_punctuality,
    group_by_location,
    hourly_activity,
    partition_by_severity,
    summarize_roster,
)


def anomaly(severity):
    return SimpleNamespace(id=uuid4(), severity=severity)


def log(event_type, hour, status=None, user_id="S1"):
    return SimpleNamespace(
        user_id=user_id,
        user_name=f"Name {user_id}",
        person_type="student",
        capture_image_url=None,
        event_type=event_type,
        attendance_status=status,
        timestamp=datetime(2026, 3, 2, hour, 15),
        created_at=datetime(2026, 3, 2, hour, 15),
    )


def test_partition_by_severity_is_total_and_disjoint():
    anomalies = [anomaly(s) for s in ("critical", "watchlist", "warning", "critical", "warning")]

    groups = partition_by_severity(anomalies)

    assert set(groups) == {"critical", "warning", "watchlist"}
    assert sum(len(g) for g in groups.values()) == len(anomalies)
    ids = [a.id for g in groups.values() for a in g]
    assert len(ids) == len(set(ids))
    assert [a.id for a in groups["critical"]] == [anomalies[0].id, anomalies[3].id]


def test_partition_by_severity_rejects_unknown_tier():
    with pytest.raises(ValueError):
        partition_by_severity([anomaly("catastrophic")])


def test_summarize_roster_counts_and_percentage():
    students = [
        SimpleNamespace(current_status=s)
        for s in ("on_campus", "on_campus", "off_campus", "unknown", "medical_leave", "on_campus")
    ]

    stats = summarize_roster(students)

    assert stats.total == 6
    assert stats.present == 3
    assert stats.off_campus == 1
    assert stats.unknown == 1
    assert stats.absent == 1
    assert stats.present_percentage == 50


def test_summarize_roster_empty():
    stats = summarize_roster([])
    assert stats.total == 0
    assert stats.present_percentage == 0


def test_event_and_punctuality_counts():
    logs = [
        log("entry", 7, "on_time"),
        log("entry", 8, "late_minor"),
        log("exit", 16, "present"),
        log("breakfast", 7),
        log("lunch", 12),
        log("class", 9, "late_major"),
        log("class", 10, "very_late"),
    ]

    events = count_event_types(logs)
    assert (events.entry, events.exit, events.meal, events.class_) == (2, 1, 2, 2)

    punctuality = count_punctuality(logs)
    assert punctuality.on_time == 2
    assert punctuality.late_minor == 1
    assert punctuality.late_major == 2


def test_hourly_activity_keeps_school_day_and_busy_hours():
    buckets = hourly_activity([log("entry", 7), log("exit", 7), log("entry", 3)])
    hours = [b.hour for b in buckets]

    assert hours[0] == "03:00"
    assert "06:00" in hours and "22:00" in hours
    assert "23:00" not in hours
    seven = next(b for b in buckets if b.hour == "07:00")
    assert (seven.entries, seven.exits, seven.total) == (1, 1, 2)


def test_group_by_location_uses_unknown_for_missing():
    records = [
        SimpleNamespace(current_location="Library"),
        SimpleNamespace(current_location=None),
        SimpleNamespace(current_location="Library"),
    ]
    groups = group_by_location(records)
    assert list(groups) == ["Library", "Unknown"]
    assert len(groups["Library"]) == 2


def test_chronic_absenteeism_thresholds():
    students = [
        SimpleNamespace(id=i, student_id=f"S{i}", full_name=f"Student {i}")
        for i in range(4)
    ]
    # absences out of 10 roll calls: 4 (high), 3 (medium), 2 (low), 1 (not chronic)
    attendance = []
    for student, absent in zip(students, (4, 3, 2, 1)):
        for day in range(10):
            attendance.append(SimpleNamespace(
                student_id=student.id,
                status="absent" if day < absent else "present",
            ))

    chronic = chronic_absenteeism(students, attendance)

    assert [c.student_id for c in chronic] == ["S0", "S1", "S2"]
    assert [c.risk_level for c in chronic] == ["high", "medium", "low"]
    assert chronic[0].absence_rate == pytest.approx(40.0)
    assert chronic[0].total_absences == 4


def test_collect_unregistered_skips_registered_and_counts():
    logs = [log("entry", 9, user_id="U2"), log("entry", 8, user_id="U1"),
            log("entry", 7, user_id="U2"), log("entry", 6, user_id="S9")]

    found = collect_unregistered(logs, {"S9"})

    assert [f.user_id for f in found] == ["U2", "U1"]
    assert found[0].detection_count == 2
    assert found[0].first_seen.hour == 9
