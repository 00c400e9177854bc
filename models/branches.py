from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

BranchType = Literal["spa", "salon"]


class Branch(BaseModel):
    id: str
    name: str
    type: BranchType
    created_at: Optional[datetime] = None


class BranchCreate(BaseModel):
    """Request model for creating a branch"""
    name: str = Field(..., min_length=1)
    type: BranchType
