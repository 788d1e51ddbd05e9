"""In-memory aggregation over query results.

Every function takes rows as returned by the repositories (ORM objects or
anything exposing the same attributes) and makes a single pass over them.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from ..shared.db.models import Severity, PresenceStatus, utcnow

MEAL_EVENTS = ("breakfast", "lunch", "supper")
ON_TIME_STATUSES = ("on_time", "present")
LATE_MAJOR_STATUSES = ("late_major", "very_late")
UNKNOWN_LOCATION = "Unknown"

# Hours always shown on the activity chart, even when empty
DAY_START_HOUR = 6
DAY_END_HOUR = 22

# Chronic absenteeism thresholds, as fractions of morning roll calls
HIGH_RISK_RATE = 0.3
MEDIUM_RISK_RATE = 0.2
CHRONIC_RATE = 0.15


@dataclass
class RosterStats:
    """Presence counts over the student roster."""
    total: int = 0
    present: int = 0
    absent: int = 0
    off_campus: int = 0
    unknown: int = 0
    present_percentage: int = 0


@dataclass
class EventTypeCounts:
    """Detections by event category."""
    entry: int = 0
    exit: int = 0
    meal: int = 0
    class_: int = 0


@dataclass
class PunctualityCounts:
    on_time: int = 0
    late_minor: int = 0
    late_major: int = 0


@dataclass
class HourBucket:
    """Activity within one hour of the day."""
    hour: str
    entries: int = 0
    exits: int = 0
    total: int = 0


@dataclass
class ChronicAbsence:
    """Student whose morning roll absence rate crossed the threshold."""
    student_id: str
    full_name: str
    absence_rate: float
    total_absences: int
    risk_level: str


@dataclass
class UnregisteredDetection:
    """Person detected by the cameras but missing from the registry."""
    user_id: str
    user_name: Optional[str]
    person_type: Optional[str]
    capture_image_url: Optional[str]
    first_seen: datetime
    detection_count: int = 1


def _value(field: Any) -> Any:
    return getattr(field, "value", field)


def start_of_day(now: Optional[datetime] = None) -> datetime:
    """Midnight of the given day (today by default)."""
    now = now or utcnow()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def is_same_day(timestamp: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """Whether ``timestamp`` falls on the same calendar day as ``now``."""
    if timestamp is None:
        return False
    return timestamp.date() == (now or utcnow()).date()


def count_by(items: Iterable[Any], key: str) -> Dict[Any, int]:
    """Count rows by the value of one attribute."""
    return dict(Counter(_value(getattr(item, key)) for item in items))


def partition_by_severity(anomalies: Iterable[Any]) -> Dict[str, List[Any]]:
    """
    Split anomalies into critical, warning and watchlist tiers.

    Every anomaly lands in exactly one tier and input order is kept within
    each tier. An unknown severity raises ``ValueError``.
    """
    groups: Dict[str, List[Any]] = {severity.value: [] for severity in Severity}
    for anomaly in anomalies:
        groups[Severity(_value(anomaly.severity)).value].append(anomaly)
    return groups


def summarize_roster(students: Iterable[Any]) -> RosterStats:
    """Presence counts; anything not on/off campus or unknown is absent."""
    stats = RosterStats()
    for student in students:
        stats.total += 1
        status = _value(student.current_status)
        if status == PresenceStatus.ON_CAMPUS.value:
            stats.present += 1
        elif status == PresenceStatus.OFF_CAMPUS.value:
            stats.off_campus += 1
        elif status == PresenceStatus.UNKNOWN.value:
            stats.unknown += 1

    stats.absent = stats.total - stats.present - stats.off_campus - stats.unknown
    if stats.total:
        stats.present_percentage = round(stats.present / stats.total * 100)
    return stats


def group_by_location(
    records: Iterable[Any],
    key: str = "current_location",
) -> Dict[str, List[Any]]:
    """Group rows by location name, keeping first-seen location order."""
    groups: Dict[str, List[Any]] = {}
    for record in records:
        location = getattr(record, key) or UNKNOWN_LOCATION
        groups.setdefault(location, []).append(record)
    return groups


def count_event_types(logs: Iterable[Any]) -> EventTypeCounts:
    counts = EventTypeCounts()
    for log in logs:
        if log.event_type == "entry":
            counts.entry += 1
        elif log.event_type == "exit":
            counts.exit += 1
        elif log.event_type in MEAL_EVENTS:
            counts.meal += 1
        elif log.event_type == "class":
            counts.class_ += 1
    return counts


def count_punctuality(logs: Iterable[Any]) -> PunctualityCounts:
    counts = PunctualityCounts()
    for log in logs:
        if log.attendance_status in ON_TIME_STATUSES:
            counts.on_time += 1
        elif log.attendance_status == "late_minor":
            counts.late_minor += 1
        elif log.attendance_status in LATE_MAJOR_STATUSES:
            counts.late_major += 1
    return counts


def hourly_activity(logs: Iterable[Any]) -> List[HourBucket]:
    """
    Per-hour entry, exit and total counts.

    Hours are kept when they saw activity or fall within the school day
    (06:00 to 22:00 inclusive).
    """
    buckets = [HourBucket(hour=f"{hour:02d}:00") for hour in range(24)]
    for log in logs:
        timestamp = log.timestamp or log.created_at
        bucket = buckets[timestamp.hour]
        bucket.total += 1
        if log.event_type == "entry":
            bucket.entries += 1
        elif log.event_type == "exit":
            bucket.exits += 1

    return [
        bucket for hour, bucket in enumerate(buckets)
        if bucket.total > 0 or DAY_START_HOUR <= hour <= DAY_END_HOUR
    ]


def chronic_absenteeism(
    students: Iterable[Any],
    attendance: Iterable[Any],
) -> List[ChronicAbsence]:
    """
    Students whose morning roll absence rate is above 15%.

    ``attendance`` holds morning roll records keyed to ``students.id``.
    Results are sorted by absence rate, highest first.
    """
    totals: Counter = Counter()
    absences: Counter = Counter()
    for record in attendance:
        totals[record.student_id] += 1
        if record.status == "absent":
            absences[record.student_id] += 1

    chronic = []
    for student in students:
        total = totals[student.id]
        rate = absences[student.id] / total if total else 0.0
        if rate <= CHRONIC_RATE:
            continue
        if rate > HIGH_RISK_RATE:
            risk_level = "high"
        elif rate > MEDIUM_RISK_RATE:
            risk_level = "medium"
        else:
            risk_level = "low"
        chronic.append(ChronicAbsence(
            student_id=student.student_id,
            full_name=student.full_name,
            absence_rate=rate * 100,
            total_absences=absences[student.id],
            risk_level=risk_level,
        ))

    chronic.sort(key=lambda item: item.absence_rate, reverse=True)
    return chronic


def collect_unregistered(
    logs: Iterable[Any],
    registered_ids: Set[str],
) -> List[UnregisteredDetection]:
    """
    Unique detections of people missing from the registry.

    ``logs`` arrive newest first, so ``first_seen`` holds the timestamp of
    the most recent detection. Sorted by detection count, highest first.
    """
    found: Dict[str, UnregisteredDetection] = {}
    for log in logs:
        if log.user_id in registered_ids:
            continue
        existing = found.get(log.user_id)
        if existing:
            existing.detection_count += 1
            continue
        found[log.user_id] = UnregisteredDetection(
            user_id=log.user_id,
            user_name=log.user_name,
            person_type=log.person_type,
            capture_image_url=log.capture_image_url,
            first_seen=log.timestamp,
        )

    return sorted(found.values(), key=lambda item: item.detection_count, reverse=True)
