"""
Therapist availability for walk-in assignment.

A therapist is present when today's attendance says present or half-day,
busy when present and assigned to at least one active visit, and free when
present and not busy. Absent therapists are neither busy nor free.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set

from core.exceptions import RejectedAssignmentError
from models.attendance import AttendanceRecord
from models.customers import CustomerVisit
from models.staff import StaffRecord

PRESENT_STATUSES = ("present", "half-day")


@dataclass(frozen=True)
class AvailabilitySnapshot:
    busy: Set[str] = field(default_factory=set)
    free: Set[str] = field(default_factory=set)


def present_staff_ids(attendance: Iterable[AttendanceRecord]) -> Set[str]:
    return {r.staff_id for r in attendance if r.status in PRESENT_STATUSES}


def partition(present_ids: Set[str], visits: Iterable[CustomerVisit]) -> AvailabilitySnapshot:
    engaged = {v.therapist_id for v in visits if v.is_active}
    busy = set(present_ids) & engaged
    free = set(present_ids) - busy
    return AvailabilitySnapshot(busy=busy, free=free)


def assignable_therapists(
    staff: Sequence[StaffRecord],
    busy: Set[str],
    present_ids: Optional[Set[str]] = None,
) -> List[StaffRecord]:
    """
    Candidates offered for a new walk-in, in roster order.

    When present_ids is omitted the roster is taken to be already narrowed
    to today's present staff.
    """
    return [
        member
        for member in staff
        if member.role == "therapist"
        and (present_ids is None or member.id in present_ids)
        and member.id not in busy
    ]


def validate_assignment(therapist_id: str, candidates: Sequence[StaffRecord]) -> StaffRecord:
    for member in candidates:
        if member.id == therapist_id:
            return member
    raise RejectedAssignmentError(
        f"Therapist {therapist_id} is not available: absent today or already with a customer"
    )
