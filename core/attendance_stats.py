"""
Attendance aggregation for the branch dashboard.

All functions are pure projections over already-loaded records. Any record
whose status is not 'absent' (present or half-day) counts as attended.
Rosters are walked in the order given; ties keep the first staff member
encountered.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from models.attendance import AttendanceRecord
from models.staff import StaffRecord

NO_PERFORMER = "N/A"


@dataclass(frozen=True)
class PerformerCount:
    name: str
    count: int


@dataclass(frozen=True)
class Performers:
    top: PerformerCount
    bottom: PerformerCount


@dataclass(frozen=True)
class StaffAttendanceSummary:
    staff: StaffRecord
    present_days: int
    total_days: int
    percentage: int


def is_attended(record: AttendanceRecord) -> bool:
    return record.status != "absent"


def rounded_percentage(part: int, whole: int) -> int:
    """Whole percent, halves rounded up. 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (whole * 2)


def present_today(records: Sequence[AttendanceRecord], today: str) -> int:
    return sum(1 for r in records if r.date == today and is_attended(r))


def attendance_rate(staff_id: str, records: Sequence[AttendanceRecord]) -> int:
    history = [r for r in records if r.staff_id == staff_id]
    attended = sum(1 for r in history if is_attended(r))
    return rounded_percentage(attended, len(history))


def attended_counts(records: Sequence[AttendanceRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for record in records:
        if is_attended(record):
            counts[record.staff_id] = counts.get(record.staff_id, 0) + 1
    return counts


def top_and_bottom_performers(
    staff: Sequence[StaffRecord],
    records: Sequence[AttendanceRecord],
) -> Performers:
    """
    Best and worst attendance across the roster.

    Top is the first staff member with the strictly highest count; nobody
    is promoted from a zero count. Bottom only considers staff with at least
    one attended day and reports N/A when there are none.
    """
    counts = attended_counts(records)

    top_name, top_count = "", 0
    bottom_name, bottom_count = None, 0

    for member in staff:
        count = counts.get(member.id, 0)
        if count > top_count:
            top_name, top_count = member.display_name, count
        if count > 0 and (bottom_name is None or count < bottom_count):
            bottom_name, bottom_count = member.display_name, count

    if bottom_name is None:
        bottom_name, bottom_count = NO_PERFORMER, 0

    return Performers(
        top=PerformerCount(name=top_name, count=top_count),
        bottom=PerformerCount(name=bottom_name, count=bottom_count),
    )


def staff_attendance_summary(
    staff: Sequence[StaffRecord],
    records: Sequence[AttendanceRecord],
) -> List[StaffAttendanceSummary]:
    """Per-staff history totals in roster order."""
    totals: Dict[str, int] = {}
    for record in records:
        totals[record.staff_id] = totals.get(record.staff_id, 0) + 1
    attended = attended_counts(records)

    summary = []
    for member in staff:
        total_days = totals.get(member.id, 0)
        present_days = attended.get(member.id, 0)
        summary.append(
            StaffAttendanceSummary(
                staff=member,
                present_days=present_days,
                total_days=total_days,
                percentage=rounded_percentage(present_days, total_days),
            )
        )
    return summary
