"""
Employee wire model.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class EmployeeDTO(BaseModel):
    """Employee as exchanged over HTTP. Unknown fields are rejected."""

    id: Optional[int] = Field(None, description="Ignored on create; taken from the path on edit")
    name: str = Field(..., min_length=1, max_length=255)
    role: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)
