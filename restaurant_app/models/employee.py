"""
Employee entity.
"""
from pydantic import BaseModel, Field
from typing import Optional


class Employee(BaseModel):
    """Employee record as persisted."""

    id: Optional[int] = Field(None, description="Assigned on first persistence")
    name: str = Field(..., min_length=1, max_length=255)
    role: Optional[str] = Field(None, max_length=100, description="Job title")
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
