"""Row builders shaped like the Supabase tables."""


def staff_row(staff_id, first, last, role="therapist", branch_id="b1", nickname=None):
    return {
        "id": staff_id,
        "first_name": first,
        "last_name": last,
        "nickname": nickname or first,
        "role": role,
        "branch_id": branch_id,
    }


def attendance_row(staff_id, date, status="present", branch_id="b1", row_id=None):
    return {
        "id": row_id or f"att-{staff_id}-{date}",
        "staff_id": staff_id,
        "date": date,
        "entry_time": "09:00:00",
        "exit_time": "",
        "status": status,
        "branch_id": branch_id,
    }


def visit_row(visit_id, therapist_id, date, is_active=False, visit_type="new", branch_id="b1"):
    return {
        "id": visit_id,
        "name": f"Customer {visit_id}",
        "phone": "5550100",
        "type": visit_type,
        "check_in_time": "10:00",
        "therapy_duration": 60,
        "check_out_time": "11:00",
        "therapist_id": therapist_id,
        "therapist_name": therapist_id,
        "date": date,
        "branch_id": branch_id,
        "amount": 0,
        "is_active": is_active,
    }



class FakeClock:
    """Stand-in for timewindow.now_local; move it by assigning .now"""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now
