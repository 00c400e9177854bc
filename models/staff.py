from pydantic import BaseModel, Field
from typing import Optional, Literal, List
from datetime import datetime

StaffRole = Literal["therapist", "receptionist", "manager", "other"]


class StaffRecord(BaseModel):
    """A staff member as read from the `staffs` table"""
    id: str
    first_name: str
    last_name: str
    nickname: str
    role: StaffRole
    branch_id: str
    age: Optional[int] = None
    address: Optional[str] = None
    contact: Optional[str] = None
    aadhar_number: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class StaffBase(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    nickname: str = Field(..., min_length=1)
    role: StaffRole = "therapist"
    age: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = None
    contact: Optional[str] = None
    aadhar_number: Optional[str] = None


class StaffCreate(StaffBase):
    pass


class StaffUpdate(StaffBase):
    pass


class StaffListResponse(BaseModel):
    success: bool
    staff: List[StaffRecord]
