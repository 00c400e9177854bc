import itertools

import pytest

from core.availability import (
    assignable_therapists,
    partition,
    present_staff_ids,
    validate_assignment,
)
from core.exceptions import RejectedAssignmentError
from models.attendance import AttendanceRecord
from models.customers import CustomerVisit
from models.staff import StaffRecord
from factories import attendance_row, staff_row, visit_row

TODAY = "2024-01-01"


def test_present_staff_ids_include_half_day():
    attendance = [
        AttendanceRecord(**attendance_row("a", TODAY, "present")),
        AttendanceRecord(**attendance_row("b", TODAY, "half-day")),
        AttendanceRecord(**attendance_row("c", TODAY, "absent")),
    ]
    assert present_staff_ids(attendance) == {"a", "b"}


def test_partition_busy_and_free():
    visits = [CustomerVisit(**visit_row("v1", "A", TODAY, is_active=True))]
    snapshot = partition({"A", "B", "C"}, visits)
    assert snapshot.busy == {"A"}
    assert snapshot.free == {"B", "C"}


def test_inactive_visits_do_not_make_busy():
    visits = [CustomerVisit(**visit_row("v1", "A", TODAY, is_active=False))]
    snapshot = partition({"A"}, visits)
    assert snapshot.busy == set()
    assert snapshot.free == {"A"}


def test_absent_therapist_is_neither_busy_nor_free():
    visits = [CustomerVisit(**visit_row("v1", "D", TODAY, is_active=True))]
    snapshot = partition({"A"}, visits)
    assert "D" not in snapshot.busy | snapshot.free


def test_assignable_keeps_roster_order_and_role():
    staff = [
        StaffRecord(**staff_row("c", "Cat", "Lee")),
        StaffRecord(**staff_row("r", "Ron", "Ash", role="receptionist")),
        StaffRecord(**staff_row("a", "Ann", "Bo")),
        StaffRecord(**staff_row("b", "Ben", "Yu")),
    ]
    candidates = assignable_therapists(staff, busy={"b"}, present_ids={"a", "b", "c", "r"})
    assert [s.id for s in candidates] == ["c", "a"]


def test_validate_assignment():
    staff = [StaffRecord(**staff_row("a", "Ann", "Bo"))]
    assert validate_assignment("a", staff).id == "a"

    with pytest.raises(RejectedAssignmentError) as exc:
        validate_assignment("z", staff)
    assert exc.value.code == "REJECTED_ASSIGNMENT"


@pytest.mark.parametrize("statuses", list(itertools.product(["present", "absent", "half-day", None], repeat=3)))
def test_busy_free_cover_present_exactly(statuses):
    ids = ["a", "b", "c"]
    staff = [StaffRecord(**staff_row(i, i.upper(), "T")) for i in ids]
    attendance = [
        AttendanceRecord(**attendance_row(i, TODAY, status))
        for i, status in zip(ids, statuses)
        if status is not None
    ]

    for active_flags in itertools.product([True, False, None], repeat=3):
        visits = [
            CustomerVisit(**visit_row(f"v-{i}", i, TODAY, is_active=flag))
            for i, flag in zip(ids, active_flags)
            if flag is not None
        ]
        present = present_staff_ids(attendance)
        snapshot = partition(present, visits)
        candidates = assignable_therapists(staff, snapshot.busy, present)

        assert snapshot.busy | snapshot.free == present
        assert snapshot.busy & snapshot.free == set()
        assert not {s.id for s in candidates} & snapshot.busy
        assert {s.id for s in candidates} == snapshot.free
