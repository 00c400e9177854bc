from pydantic import BaseModel, Field
from typing import Optional, Literal

AttendanceStatus = Literal["present", "absent", "half-day"]

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class AttendanceRecord(BaseModel):
    """One attendance row; at most one per staff member per date"""
    id: Optional[str] = None
    staff_id: str
    date: str = Field(..., pattern=ISO_DATE_PATTERN)
    entry_time: str = ""
    exit_time: Optional[str] = ""
    status: AttendanceStatus
    branch_id: str


class AttendanceMark(BaseModel):
    """Request model for marking today's (or a chosen day's) attendance"""
    staff_id: str
    status: AttendanceStatus
    date: Optional[str] = Field(default=None, pattern=ISO_DATE_PATTERN)


class AttendanceUpdate(BaseModel):
    """Request model for correcting an attendance row"""
    entry_time: str
    exit_time: Optional[str] = ""
    status: AttendanceStatus
