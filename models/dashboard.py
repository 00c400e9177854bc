from pydantic import BaseModel
from typing import List


class NamedCount(BaseModel):
    name: str
    count: int


class StaffAttendanceRow(BaseModel):
    staff_id: str
    name: str
    nickname: str
    role: str
    present_days: int
    total_days: int
    percentage: int


class AttendanceDashboard(BaseModel):
    """Response model for the attendance dashboard"""
    success: bool
    date: str
    total_staff: int
    present_today: int
    top_attendee: NamedCount
    low_attendee: NamedCount
    staff: List[StaffAttendanceRow]


class TherapistLoadRow(BaseModel):
    staff_id: str
    name: str
    nickname: str
    count: int
    percentage: int


class CustomersDashboard(BaseModel):
    """Response model for the customers dashboard"""
    success: bool
    start_date: str
    end_date: str
    total_customers: int
    new_customers: int
    regular_customers: int
    top_therapist: NamedCount
    therapists: List[TherapistLoadRow]
