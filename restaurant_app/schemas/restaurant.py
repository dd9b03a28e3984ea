"""
Restaurant wire models.
Requests reference employees by id; responses carry them expanded.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from restaurant_app.schemas.employee import EmployeeDTO


class MenuDTO(BaseModel):
    id: Optional[int] = Field(None, description="Ignored on write")
    language: str = Field(..., min_length=1, max_length=50)

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class RestaurantRequestDTO(BaseModel):
    """Restaurant create/edit request."""

    id: Optional[int] = Field(None, description="Ignored; the path id wins on edit")
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(0, ge=0)
    menu: Optional[MenuDTO] = None
    employee_ids: List[int] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class RestaurantDTO(BaseModel):
    """Restaurant response with menu and employees expanded."""

    id: int
    name: str
    location: str
    capacity: int
    menu: Optional[MenuDTO] = None
    employees: List[EmployeeDTO] = Field(default_factory=list)
