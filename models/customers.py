from pydantic import BaseModel, Field
from typing import Optional, Literal, List

from models.attendance import ISO_DATE_PATTERN
from models.staff import StaffRecord

VisitType = Literal["new", "regular"]


class CustomerVisit(BaseModel):
    """A walk-in visit as stored in the `customers` table"""
    id: str
    name: str
    phone: str
    type: VisitType
    check_in_time: str
    therapy_duration: int
    check_out_time: str
    therapist_id: str
    therapist_name: str = ""
    date: str = Field(..., pattern=ISO_DATE_PATTERN)
    branch_id: str
    amount: float = 0
    is_active: bool = False


class CustomerCreate(BaseModel):
    """Request model for adding a walk-in"""
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    type: VisitType = "new"
    check_in_time: str
    therapy_duration: int = 60
    therapist_id: str = Field(..., min_length=1)
    amount: float = Field(default=0, ge=0)


class CustomerCreateResponse(BaseModel):
    success: bool
    customer: CustomerVisit
    message: str


class AvailabilityResponse(BaseModel):
    """Today's therapist availability for a branch"""
    date: str
    busy: List[str]
    free: List[str]
    assignable: List[StaffRecord]


class CountdownMessage(BaseModel):
    customer_id: Optional[str] = None
    check_out_time: str
    label: str
    expired: bool
