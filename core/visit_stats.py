"""
Walk-in visit statistics for the customers dashboard.

Date bounds compare 'YYYY-MM-DD' strings lexicographically, which matches
calendar order because the format is fixed-width and zero-padded.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from core.attendance_stats import rounded_percentage
from models.customers import CustomerVisit
from models.staff import StaffRecord


@dataclass(frozen=True)
class VisitTotals:
    total: int
    new_count: int
    regular_count: int


@dataclass(frozen=True)
class TherapistCount:
    name: str
    count: int


@dataclass(frozen=True)
class TherapistLoad:
    staff: StaffRecord
    count: int
    percentage: int


def within_range(visits: Sequence[CustomerVisit], start: str, end: str) -> List[CustomerVisit]:
    return [v for v in visits if start <= v.date <= end]


def totals(visits: Sequence[CustomerVisit]) -> VisitTotals:
    new_count = sum(1 for v in visits if v.type == "new")
    regular_count = sum(1 for v in visits if v.type == "regular")
    return VisitTotals(total=len(visits), new_count=new_count, regular_count=regular_count)


def visit_counts(visits: Sequence[CustomerVisit]) -> Dict[str, int]:
    # dict keeps first-appearance order, which the tie-break below relies on
    counts: Dict[str, int] = {}
    for visit in visits:
        counts[visit.therapist_id] = counts.get(visit.therapist_id, 0) + 1
    return counts


def top_therapist(visits: Sequence[CustomerVisit], staff: Sequence[StaffRecord]) -> TherapistCount:
    """
    Therapist with the most visits.

    Ids are considered in the order they first appear in visits. A therapist
    missing from the roster is never promoted, even with the highest count.
    """
    roster = {member.id: member for member in staff}

    top = TherapistCount(name="", count=0)
    for therapist_id, count in visit_counts(visits).items():
        if count > top.count:
            member = roster.get(therapist_id)
            if member is not None:
                top = TherapistCount(name=member.display_name, count=count)
    return top


def per_therapist_load(visits: Sequence[CustomerVisit], therapist_id: str) -> int:
    return sum(1 for v in visits if v.therapist_id == therapist_id)


def therapist_loads(visits: Sequence[CustomerVisit], staff: Sequence[StaffRecord]) -> List[TherapistLoad]:
    """Visit count per roster therapist with its share of the busiest therapist's count."""
    therapists = [member for member in staff if member.role == "therapist"]
    counts = [per_therapist_load(visits, member.id) for member in therapists]
    busiest = max(counts, default=0)

    return [
        TherapistLoad(staff=member, count=count, percentage=rounded_percentage(count, busiest))
        for member, count in zip(therapists, counts)
    ]
